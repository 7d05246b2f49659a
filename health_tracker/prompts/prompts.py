BASE_INSTRUCTIONS = """
You are a professional AI health assistant working with structured data.
- Your output MUST be a single JSON object that strictly follows the provided schema.
- Do not output any Markdown or other text outside of the JSON structure.
"""

LAB_EXTRACTION_PROMPT_TEMPLATE = f"""
{BASE_INSTRUCTIONS}

Analyze this lab result text and extract health markers (vitamins, minerals, blood values) with recommendations.

---
LAB RESULT TEXT:
{{lab_text}}
---
JSON SCHEMA & FORMAT INSTRUCTIONS:
{{format_instructions}}
---
Focus on:
- Vitamin D, B12, Iron, Folate, Calcium, Magnesium levels
- Blood markers like hemoglobin, RBC, WBC
- Metabolic markers like glucose, cholesterol
- For each abnormal marker, provide a relevant recommendation
- Dietary recommendations should suggest specific foods
- Physical recommendations should suggest gentle activities
- Supplement recommendations should include dosage guidance
"""

INTERACTION_CHECK_PROMPT_TEMPLATE = f"""
{BASE_INSTRUCTIONS}

Check for potential drug-supplement interactions between these medications and supplements.

---
MEDICATIONS:
{{medication_list}}

SUPPLEMENTS:
{{supplement_list}}
---
JSON SCHEMA & FORMAT INSTRUCTIONS (if no interactions are found, return an empty "interactions" array):
{{format_instructions}}
---
Common interactions to check:
- Blood thinners with Vitamin E, Fish Oil, Ginkgo
- Blood pressure meds with Potassium, Licorice
- Thyroid meds with Calcium, Iron
- Diabetes meds with Chromium, Alpha-lipoic acid
- Antidepressants with St. John's Wort, 5-HTP
- Antibiotics with Probiotics, Calcium, Zinc

Only report real, clinically significant interactions.
"""
