"""Instruction prompt for the generation tier of ``transform``."""

TRANSFORM_PROMPT_TEMPLATE = """You are an expert text transformer that operates strictly on the PROVIDED_INPUT.
Task: {workflow}  (if unclear, treat it as 'outline' or 'summarize', whichever fits)
Rules:
1) Keep it brief (at most 120 words) unless asked otherwise.
2) Use only facts found in PROVIDED_INPUT. Write "not in input" for anything missing.
3) Keep numbers, units, names and quotes exactly as given.
4) When summarizing, write 3-5 bullets covering what, why, how and the key numbers.
5) When extracting, return valid minimal JSON holding only the keys you actually found.
6) When rewriting or translating, keep meaning and entities intact and flag uncertainties.
7) For long input, write short section-wise bullets first, then a final synthesis.
8) End with one line: Summary: <very short gist>.

PROVIDED_INPUT:
<<<
{data}
>>>

Return only the final output, without a preface."""


def build_transform_prompt(workflow: str, data: str) -> str:
    return TRANSFORM_PROMPT_TEMPLATE.format(workflow=workflow or "outline", data=data)
