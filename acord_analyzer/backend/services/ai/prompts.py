"""
Extraction instructions sent to the model with every document.

The instructions are static: only the document bytes vary between calls.
"""

import json
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

# Handle both package imports and standalone imports
try:
    from ...models import AcordCertificate
except ImportError:
    from models import AcordCertificate


# =============================================================================
# Extraction Prompt
# =============================================================================

EXTRACTION_PROMPT = """You are an information extraction system for insurance certificates.
Answer with EXACTLY ONE of:
- null
- a single JSON object that follows the OUTPUT SCHEMA below

## Document Check (Confidence Gate)
- Decide whether the document is a genuine ACORD 25 Certificate of Liability Insurance.
- You MUST be at least 95% certain.
- If you are less than 95% certain, or it is another form type, answer only: null
- Typical markers: "CERTIFICATE OF LIABILITY INSURANCE", "ACORD 25", "INSURER(S) AFFORDING COVERAGE",
  "CERTIFICATE HOLDER", "PRODUCER", "POLICY NUMBER", "POLICY EFF", "POLICY EXP", "LIMITS".

## Scope
- Use ONLY the first five (5) pages of the PDF.
- Anything not visible on those pages is missing.

## Extraction Rules
1. **No Guessing**: If a value is missing or unclear, use null. DO NOT HALLUCINATE.
2. **Certificate Holder**: Return ONLY the first line under "CERTIFICATE HOLDER" (the business name, no address lines).
3. **Policies**:
   - insurer_letter comes from the INSR LTR column and is a single uppercase letter (usually A-F).
     Do not replace it with the insurer name. Skip the policy row if the letter is missing or uncertain.
   - Extract policy type, policy number, effective date and expiry date.
4. **Coverages**:
   - limit_type is the label exactly as printed (e.g. "EACH OCCURRENCE", "MED EXP").
   - limit_value is a number: "$1,000,000" becomes 1000000. Remove "$", commas and spaces.
   - Leave out any coverage whose amount is 0, blank, null or just a "$" sign.
5. **Insurers**: Read every available row (A, B, C, ...) of "INSURER(S) AFFORDING COVERAGE" with its letter, name and NAIC.
   naic_code is digits only; use null if it is not clearly digits.
6. **Producer**:
   - full_name: the person in the NAME field under PRODUCER; null if blank or a business name.
   - doing_business_as: the agency or brokerage on the first line under "PRODUCER"; null if absent.
   - email_address: from "E-MAIL ADDRESS"; null if absent.
   - license_number: the value of the "License#" field; null if absent.
7. **Contact Numbers**: phone_number and fax_number are digits only with no formatting (e.g. "1234567890").
   fax_number is null if absent.
8. **Dates**: Always MM/DD/YYYY.

## OUTPUT SCHEMA
{
  "certificate_information": {
    "certificate_holder": "string",
    "certificate_number": "string",
    "revision_number": "string or null",
    "issue_date": "MM/DD/YYYY"
  },
  "insurers": [
    {"insurer_letter": "string (A, B, C, ...)", "insurer_name": "string", "naic_code": "string or null"}
  ],
  "policies": [
    {
      "policy_information": {
        "policy_type": "string",
        "policy_number": "string",
        "effective_date": "MM/DD/YYYY",
        "expiry_date": "MM/DD/YYYY"
      },
      "insurer_letter": "string (A, B, C, ...)",
      "coverages": [{"limit_type": "string", "limit_value": number}]
    }
  ],
  "producer_information": {
    "primary_details": {
      "full_name": "string or null",
      "email_address": "string or null",
      "doing_business_as": "string or null"
    },
    "contact_information": {
      "phone_number": "string",
      "fax_number": "string or null",
      "license_number": "string or null"
    },
    "address_details": {
      "address_line_1": "string",
      "address_line_2": "string or null",
      "address_line_3": "string or null",
      "city": "string",
      "state": "string",
      "zip_code": "string",
      "country": "USA"
    }
  }
}

## Strict Output Rules
- Return ONLY null or the JSON object above.
- No markdown, no code fences, no explanations, no trailing commas.
- If you are not at least 95% sure this is an ACORD 25, return null."""


# =============================================================================
# Request Builder
# =============================================================================


@dataclass(frozen=True)
class ExtractionRequest:
    """Instruction text plus the record type the answer must validate as."""

    instructions: str
    schema: type[AcordCertificate]

    @property
    def schema_descriptor(self) -> dict[str, Any]:
        """JSON Schema of the expected object (the answer may also be null)."""
        return self.schema.model_json_schema()

    def schema_text(self) -> str:
        return (
            "JSON Schema of the object (the whole answer may instead be null):\n"
            + json.dumps(self.schema_descriptor, indent=2)
        )


@lru_cache
def build_extraction_request() -> ExtractionRequest:
    """Return the static extraction request. Same value on every call."""
    return ExtractionRequest(instructions=EXTRACTION_PROMPT, schema=AcordCertificate)
