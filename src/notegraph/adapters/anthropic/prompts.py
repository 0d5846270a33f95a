"""Prompt templates sent to the Messages API."""

from __future__ import annotations

from typing import Final

DETECT_ENGLISH_PROMPT: Final[str] = """\
Analyze this text and determine if it's written in English. Respond with only "YES" \
if it's English, or "NO" if it's in another language.

Text: "{text}\""""

TRANSLATE_PROMPT: Final[str] = """\
Translate the following text to English. Maintain the original meaning, tone, and \
structure. If the text is already in English, return it unchanged.

Text to translate: "{text}"

Translated text:"""

LOCATION_SEARCH_PROMPT: Final[str] = """\
Please search the web for current information about the architecture office: \
"{name} architecture office"

Context: Find the headquarters location, country, and city for this architecture office

Please search the web and provide:
1. The headquarters location (city and country) of this architecture office
2. Official website if available
3. Brief company description focusing on their architecture work

Respond with a JSON object in this format:
{{
  "country": "string or null",
  "city": "string or null",
  "website": "string or null",
  "description": "string or null"
}}"""

ANALYSIS_PROMPT: Final[str] = """\
You are an expert data analyst for the AEC (Architecture, Engineering, Construction) \
industry. Analyze the text below, decide its category and extract structured data. \
Your categorization is final; do not hedge.

CATEGORIZATION GUIDELINES:

OFFICE (architectural or engineering firms):
- companies, practices, studios and firms providing design or engineering services
- look for: company names, founding dates, office locations, specializations, staff

PROJECT (construction or building projects):
- specific buildings, developments, towers, complexes, facilities
- look for: project names, locations, budgets, timelines, building types, phases

REGULATION (laws, codes, standards):
- building codes, zoning laws, fire safety rules, permits, compliance standards
- look for: jurisdiction, effective dates, regulation numbers, requirements

Use "unknown" only when the text is truly ambiguous.

LOCATIONS: whenever a place is mentioned, give both city and country using your \
geographic knowledge. Use "Unknown" only as a last resort.

EMPLOYEES: list every named person working for the office in "employees". Never \
report a head count in size.employeeCount; it is derived from the employee list.

Text to analyze: "{text}"

Respond with JSON only, in exactly this shape:
{{
  "categorization": {{
    "category": "office|project|regulation|unknown",
    "confidence": 0.95,
    "reasoning": "key indicators and why this category was chosen"
  }},
  "extraction": {{
    "extractedData": {{
      // office: name, officialName, founded, status (active|acquired|dissolved),
      //   location {{headquarters {{city, country}}, otherOffices [{{city, country}}]}},
      //   size {{sizeCategory (boutique|medium|large|global), annualRevenue}},
      //   specializations [], notableWorks []
      // project: projectName, status (concept|planning|construction|completed),
      //   location {{city, country}}, financial {{budget, currency}},
      //   details {{projectType, description}}
      // regulation: name, jurisdiction {{level (city|state|country), cityName,
      //   stateName, countryName}}, regulationType, effectiveDate, description
    }},
    "confidence": 0.9,
    "missingFields": ["field1"],
    "reasoning": "how the data was extracted",
    "employees": [
      {{"name": "...", "role": "...", "description": "...", "expertise": [],
        "location": {{"city": "...", "country": "..."}}}}
    ],
    "employeeDistribution": {{"architects": 0, "engineers": 0, "designers": 0,
      "administrative": 0}},
    "clients": [{{"clientName": "..."}}],
    "technology": [{{"technologyName": "...", "officeId": "..."}}],
    "financials": [{{"recordType": "...", "amount": 0, "officeId": "..."}}],
    "supplyChain": [{{"supplierName": "..."}}],
    "landData": [{{"location": {{"city": "...", "country": "..."}}}}],
    "cityData": [{{"cityId": "..."}}],
    "projectData": [{{"projectId": "..."}}],
    "companyStructure": [{{"officeId": "..."}}],
    "divisionPercentages": [{{"officeId": "...", "divisionType": "..."}}],
    "newsArticles": [{{"title": "...", "url": "..."}}],
    "politicalContext": [{{"jurisdiction": {{"country": "...", "level": "..."}}}}]
  }},
  "overallConfidence": 0.92
}}

Omit optional lists that do not apply. extractedData may be a list when the text \
describes several entities of the chosen category."""


def detect_english_prompt(text: str) -> str:
    return DETECT_ENGLISH_PROMPT.format(text=text)


def translate_prompt(text: str) -> str:
    return TRANSLATE_PROMPT.format(text=text)


def location_search_prompt(name: str) -> str:
    return LOCATION_SEARCH_PROMPT.format(name=name)


def analysis_prompt(text: str) -> str:
    return ANALYSIS_PROMPT.format(text=text)
