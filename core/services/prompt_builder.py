# =============================================================================
# core/services/prompt_builder.py - Outbreak Analysis Prompt
# =============================================================================
# Turns a ZIP's windowed symptom totals into a single request string for the
# language model. The model is asked for a JSON document, but the answer is
# passed back to the caller verbatim and never parsed here.
#
# Usage:
#   prompt = build_outbreak_prompt(
#       zip_code="91344",
#       population=52450,
#       totals={"fever": 12, ...},
#       zip_metadata="ZIP_CODE = 91344, PO_NAME = Granada Hills, ...",
#       entries_included=14,
#   )
# =============================================================================

from __future__ import annotations

from typing import Mapping

from core.models.symptoms import SYMPTOM_KEYS

SYSTEM_PROMPT = "You are a helpful assistant."

# =============================================================================
# Response Template
# =============================================================================
# Shown to the model as the exact shape to answer with. Every disease listed
# in possibleDiseases must also be a key of amountInfected.

RESPONSE_EXAMPLE = """{
  "possibleDiseases": ["common cold", "influenza"],
  "severity": {"common cold": "mild", "influenza": "moderate"},
  "safetyGuidelines": [
    "Wash your hands frequently and avoid touching your face.",
    "Cover your mouth and nose with a tissue or your elbow when coughing or sneezing.",
    "Stay home if you are feeling sick and seek medical attention if necessary."
  ],
  "amountInfected": {"common cold": 1014, "influenza": 966},
  "percentageReported": 0.116,
  "populationDensity": "high",
  "symptoms": {"headache": 1298, "fever": 1604, "cough": 1449},
  "zipCode": "91344",
  "population": 52450,
  "ageDistribution": {"0-18": 5487, "19-35": 9765, "36-60": 16542, "61+": 2894},
  "vaccinationStatus": {
    "fullyVaccinated": 16234,
    "partiallyVaccinated": 12456,
    "notVaccinated": 10032
  },
  "comorbidities": {"diabetes": 2654, "hypertension": 4762, "respiratoryConditions": 2375}
}"""

OUTBREAK_PROMPT = """
<context>
An area with ZIP code {zip_code} has a population of {population}.
Over the last {entries_included} reporting day(s): {symptom_summary}.
Details about the ZIP code area: {zip_metadata}
</context>

<task>
Based on these symptoms, which real-life diseases might be prevalent in this area?
If the number of reported symptoms is not significant compared to the population,
there may be no significant disease; in that case use ["none"] for possibleDiseases.
</task>

<output_format>
Answer with a single JSON object in EXACTLY this format:
- possibleDiseases: list of disease names
- severity: each disease in possibleDiseases rated low, mild, moderate, severe or critical
- safetyGuidelines: one 3-sentence guideline per disease
- amountInfected: estimated number infected, one key per disease in possibleDiseases
- percentageReported: {percentage_reported}
- populationDensity: a short description of population density
- symptoms: the count of each reported symptom
- zipCode and population as given above
- ageDistribution, vaccinationStatus and comorbidities estimates

Example:
{response_example}
</output_format>
"""


def format_symptom_summary(totals: Mapping[str, int], population: int) -> str:
    """
    Describe symptom totals in plain language, in symptom enumeration order.

    Example:
        "5 out of 1000 people have fever, 0 out of 1000 people have cough"
    """
    parts = [
        f"{totals[key]} out of {population} people have {key}"
        for key in SYMPTOM_KEYS
        if key in totals
    ]
    return ", ".join(parts) if parts else "no symptoms were reported"


def build_outbreak_prompt(
    zip_code: str,
    population: int,
    totals: Mapping[str, int],
    zip_metadata: str,
    entries_included: int,
) -> str:
    """
    Build the user prompt for an outbreak analysis.

    Args:
        zip_code: ZIP being analyzed
        population: Positive population of the ZIP
        totals: Per-symptom totals (keys from the symptom set)
        zip_metadata: "header = value, ..." text for the ZIP
        entries_included: Number of day entries summed into totals

    Returns:
        Prompt text ready to send as the user message

    Raises:
        ValueError: If population is not positive, or totals has unknown keys
    """
    if population is None or population <= 0:
        raise ValueError(f"population must be a positive integer, got {population!r}")

    unknown = sorted(set(totals) - set(SYMPTOM_KEYS))
    if unknown:
        raise ValueError(f"Unknown symptom keys in totals: {unknown}")

    reported = sum(totals.values())
    percentage_reported = round(reported / population, 4)

    return OUTBREAK_PROMPT.format(
        zip_code=zip_code,
        population=population,
        entries_included=entries_included,
        symptom_summary=format_symptom_summary(totals, population),
        zip_metadata=zip_metadata or "none available",
        percentage_reported=percentage_reported,
        response_example=RESPONSE_EXAMPLE,
    ).strip()
