TIMELINE_EVENTS_PROMPT = """
You are an expert historian and timeline creator, focused on extracting all historical events.
Please provide ONLY a JSON array of events in this exact format:

[
  { "date": "YYYY", "summary": "Simple 1-3 line summary in plain language that explains the event's importance and key facts." },
  ...
]

Analyze the following text and extract ALL important historical events. For each event, provide the date in one of these formats ONLY:
- "YYYY" (e.g., "2020", "1945")
- "YYYY BC" (e.g., "1000 BC", "44 BC")

STRICT RULES:
- Do NOT use months, centuries, decades, or vague time periods (e.g., "May 2020", "7th century", "1800s", "the 20th century", "the 1990s", "ancient times", etc.).
- Every date must be a specific year, and for BCE use "BC" after the year.
- Do NOT write "AD" for modern dates. Just write "YYYY".
- Use "BC" only if the event happened before the common era.
- The date must always be in one of the formats above.
- The summary must be written in simple, clear language that a high school student could easily understand.

Text:\"\"\"{text}\"\"\"
"""


def build_timeline_events_prompt(text: str) -> str:
    # str.format would trip over the literal braces in the JSON example
    return TIMELINE_EVENTS_PROMPT.replace("{text}", text)
