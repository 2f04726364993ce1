from __future__ import annotations

from dataclasses import dataclass

MAX_INPUT_CHARS = 3000

SYSTEM_PROMPT = "You are a helpful ATS assistant. Output strict JSON."

ANALYSIS_PROMPT = """
You are an expert Applicant Tracking System (ATS).
Evaluate this candidate's resume against the Job Description.

RESUME TEXT:
"{resume_text}"

JOB DESCRIPTION:
"{job_description}"

Scoring guidance:
- 80-100: strong match, the candidate covers almost all required skills.
- 50-79: potential match, some required skills are missing.
- Below 50: poor match.
- Weigh hard technical skills above soft skills.
- Only list missing keywords that actually appear in the job description. Do not invent skills.

Output strictly in JSON format with exactly these keys:
{{
    "score": (integer 0-100),
    "missingKeywords": ["array", "of", "strings"],
    "formattingIssues": ["array", "of", "strings"],
    "feedback": "string"
}}
Do not include markdown formatting (like ```json).
"""


@dataclass(frozen=True)
class PromptMessages:
    system: str
    user: str


def build_prompt(resume_text: str, job_description: str) -> PromptMessages:
    return PromptMessages(
        system=SYSTEM_PROMPT,
        user=ANALYSIS_PROMPT.format(
            resume_text=resume_text[:MAX_INPUT_CHARS],
            job_description=job_description[:MAX_INPUT_CHARS],
        ),
    )
