"""Prompt assembly for contract analysis requests."""

from ..models.enums import EventType, RiskLevel


ROLE_PREAMBLE = """You are a legal contract analysis expert specializing in risk assessment and deadline management. Your task is to carefully analyze the provided contract document and extract accurate, factual information without making assumptions or hallucinating details."""

EXTRACTION_RULES = """CRITICAL INSTRUCTIONS:
1. ONLY extract information that is EXPLICITLY stated in the contract text
2. DO NOT invent or assume dates, amounts, or obligations that are not clearly written
3. If a piece of information is not present in the contract, omit it from your response
4. Quote exact phrases from the contract when identifying obligations and deadlines
5. Be extremely precise with date formats and numerical values"""

TASK_INSTRUCTIONS = """YOUR TASK:
Analyze this contract and provide a structured JSON response following the exact format below. Pay special attention to:

METADATA EXTRACTION:
- Contract Value: Look for explicit monetary amounts (e.g., "total contract value of $X", "consideration of $Y", "payment of $Z")
- Effective Date: The date when the contract becomes active (look for "effective date", "commencement date", "start date")
- Expiry/Termination Date: When the contract ends (look for "expiry date", "termination date", "contract period", "term")
- Parties: Extract full legal names of all contracting parties from the signature blocks, preamble, or party definitions

DOCUMENT STRUCTURE:
- Identify all major sections and clauses (e.g., Definitions, Scope of Work, Payment Terms, Deliverables, Termination, Liability, etc.)
- For each section, provide a concise summary of key points (2-3 sentences maximum)
- Preserve the hierarchical order of sections as they appear in the contract

TIMELINE EVENTS - THIS IS CRITICAL:
For each deadline, obligation, or milestone mentioned in the contract:

a) TITLE: Create a clear, descriptive title (e.g., "Phase 1 Deliverable Due", "Annual Payment Due", "Notice Period for Termination")

b) DATE: Extract the EXACT date in YYYY-MM-DD format. If the contract states:
   - A specific date (e.g., "December 31, 2025") -> use that exact date
   - A relative timeframe (e.g., "within 30 days of signing") -> calculate from the effective date if possible
   - Periodic events (e.g., "monthly", "annually") -> create separate entries for each occurrence
   - If NO specific date is provided, DO NOT create an event

c) TYPE: Categorize accurately:
   - "Deliverable": Physical delivery of goods/services/work product
   - "Payment": Any financial payment obligation
   - "Milestone": Project checkpoints, reviews, approvals, acceptance criteria
   - "Renewal": Contract renewal decision points, renewal notices
   - "Termination": Contract end dates, termination windows, notice periods

d) RISK LEVEL: Assess based on EXPLICIT consequences stated in the contract:
   - "Critical": Events with severe penalties (>10% contract value), termination rights, or legal liability
   - "High": Events with significant penalties (5-10% contract value), material breach implications, or service interruption
   - "Medium": Events with moderate penalties (1-5% contract value), interest charges, or minor consequences
   - "Low": Events with minimal or no explicit penalties, administrative requirements

e) REPERCUSSION: Quote or paraphrase the EXACT consequences stated in the contract. Include:
   - Specific penalty amounts or percentages
   - Rights triggered (termination, suspension, damages)
   - Interest rates or late fees
   - Legal remedies available
   - If no repercussion is explicitly stated, write "{no_repercussion}"

VALIDATION REQUIREMENTS:
- Every date must correspond to an actual date mentioned in the contract
- Every repercussion must reference actual contract language
- Risk levels must be justified by explicit contract terms
- Do not create speculative or "example" events"""

FINAL_REMINDERS = """FINAL REMINDERS:
- Accuracy over completeness: It's better to provide fewer, accurate events than many speculative ones
- Always ground your response in the actual contract text
- When in doubt, quote the contract directly
- Ensure all dates are in chronological order
- Include ONLY information that can be verified from the provided contract text

Now analyze the contract and provide your response in valid JSON format:"""

NO_REPERCUSSION = "No specific repercussion mentioned in contract"


def output_schema() -> str:
    """Describe the JSON document the model must return."""
    event_types = "|".join(t.value for t in EventType)
    risk_levels = "|".join(r.value for r in RiskLevel)
    return f"""RESPONSE FORMAT (strict JSON):
{{
  "metadata": {{
    "value": "Exact contract value with $ symbol or 'Not specified' if not found",
    "effectiveDate": "YYYY-MM-DD or leave empty if not found",
    "expiryDate": "YYYY-MM-DD or leave empty if not found",
    "parties": ["Full legal name of Party 1", "Full legal name of Party 2"]
  }},
  "structure": [
    {{
      "section": "Section Title as it appears in contract",
      "content": "Brief factual summary of section contents (2-3 sentences, no speculation)"
    }}
  ],
  "timelineEvents": [
    {{
      "title": "Descriptive event title",
      "date": "YYYY-MM-DD (only if date is explicitly stated or calculable)",
      "type": "{event_types}",
      "risk": "{risk_levels}",
      "repercussion": "Exact consequence as stated in contract, with specific amounts/penalties quoted"
    }}
  ]
}}"""


def build_prompt(contract_text: str) -> str:
    """
    Assemble the single completion request for a contract.

    The contract text is embedded verbatim; any string, including an
    empty one, is accepted.
    """
    return "\n\n".join([
        ROLE_PREAMBLE,
        EXTRACTION_RULES,
        f"CONTRACT DOCUMENT:\n{contract_text}",
        TASK_INSTRUCTIONS.format(no_repercussion=NO_REPERCUSSION),
        output_schema(),
        FINAL_REMINDERS,
    ])
