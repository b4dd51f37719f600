"""
Prompt construction for tone- and audience-specific pain summaries.

Every lookup here is a total table over the tone and audience enumerations,
so each combination can be rendered and tested on its own. Rendering is pure:
identical inputs always produce byte-identical prompt text.
"""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Final

from painmap.core.stats_engine import DateRange, format_score


class SummaryTone(StrEnum):
    COMPASSIONATE = "compassionate"
    PROFESSIONAL = "professional"
    CLINICAL = "clinical"
    ENCOURAGING = "encouraging"
    FACTUAL = "factual"


class SummaryAudience(StrEnum):
    PATIENT = "patient"
    DOCTOR = "doctor"
    CAREGIVER = "caregiver"
    FAMILY = "family"
    RESEARCH = "research"


DEFAULT_TONE = SummaryTone.COMPASSIONATE
DEFAULT_AUDIENCE = SummaryAudience.PATIENT

_MONTH_ABBREVIATIONS: Final[tuple[str, ...]] = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)

SAFETY_CLAUSE: Final[str] = """IMPORTANT: This is purely a data summary tool. Do NOT provide:
- Medical diagnoses or assessments
- Treatment recommendations
- Prognoses or predictions
- Medical advice of any kind
- Suggestions for medical intervention
- Directives telling the reader what they should do"""

TONE_GUIDANCE: Final[dict[SummaryTone, str]] = {
    SummaryTone.COMPASSIONATE: (
        "TONE GUIDANCE: Be warm, caring, and empathetic. Think of yourself as a supportive "
        "friend who genuinely cares about the person's wellbeing. Use personal, kind language "
        "that makes them feel understood and supported."
    ),
    SummaryTone.PROFESSIONAL: (
        "TONE GUIDANCE: Be neutral and businesslike. Think of yourself as a professional "
        "colleague providing a clear, objective report. Avoid emotional language and personal "
        "connection."
    ),
    SummaryTone.CLINICAL: (
        "TONE GUIDANCE: Be formal and technical. Think of yourself as writing for a medical "
        "chart or clinical documentation. Use precise terminology and formal language."
    ),
    SummaryTone.ENCOURAGING: (
        "TONE GUIDANCE: Be enthusiastic and motivating! Think of yourself as a cheerleader "
        "celebrating their efforts. Use upbeat, positive language with energy and excitement. "
        "Make them feel proud of their tracking work!"
    ),
    SummaryTone.FACTUAL: (
        "TONE GUIDANCE: Be completely neutral and objective. Think of yourself as a data "
        "printout or statistical report. Use no emotion, no personal connection, just pure "
        "facts in the driest possible way."
    ),
}

AUDIENCE_CONTEXT: Final[dict[SummaryAudience, str]] = {
    SummaryAudience.PATIENT: (
        "Audience: This summary is for the patient themselves. Present the recorded pain "
        "tracking data in a clear, understandable way without medical interpretation."
    ),
    SummaryAudience.DOCTOR: (
        "Audience: This summary is for a medical doctor or healthcare provider. Present the "
        "recorded data objectively and professionally for their review."
    ),
    SummaryAudience.CAREGIVER: (
        "Audience: This summary is for a caregiver (family member, friend, or professional "
        "caregiver). Present the recorded data in accessible terms without care "
        "recommendations."
    ),
    SummaryAudience.FAMILY: (
        "Audience: This summary is for family members. Present the recorded pain tracking "
        "data clearly without medical interpretations or advice."
    ),
    SummaryAudience.RESEARCH: (
        "Audience: This summary is for research purposes or professionals conducting "
        "studies. Present objective, detailed data information."
    ),
}


def _requirements(*lines: str) -> str:
    return "Requirements:\n" + "\n".join(f"- {line}" for line in lines)


SUMMARY_REQUIREMENTS: Final[dict[tuple[SummaryTone, SummaryAudience], str]] = {
    (SummaryTone.COMPASSIONATE, SummaryAudience.PATIENT): _requirements(
        "Keep it concise (2-3 sentences maximum)",
        "Use warm, caring, empathetic language as if speaking to a friend",
        'Address the reader directly with "you" and use personal tone',
        'Acknowledge their experience with phrases like "I see", "I understand", '
        '"I know this can be..."',
        "Express genuine care and concern for their wellbeing",
        "Present the data gently and supportively",
        "Make them feel heard and validated",
        "Be warm and kind without medical advice",
    ),
    (SummaryTone.COMPASSIONATE, SummaryAudience.DOCTOR): _requirements(
        "Keep it concise and professional",
        "Present data clearly and objectively",
        "Use appropriate medical terminology for data presentation",
        "Focus on the recorded patterns and numbers",
        "Maintain professional tone without clinical interpretation",
    ),
    (SummaryTone.COMPASSIONATE, SummaryAudience.CAREGIVER): _requirements(
        "Keep it clear and factual",
        "Present data in accessible terms",
        "Focus on what was recorded",
        "Avoid suggesting specific care actions",
        "Be supportive while staying data-focused",
    ),
    (SummaryTone.COMPASSIONATE, SummaryAudience.FAMILY): _requirements(
        "Use simple, clear language",
        "Present data in everyday terms",
        "Focus on what the numbers show",
        "Avoid medical interpretations",
        "Be supportive without medical advice",
    ),
    (SummaryTone.COMPASSIONATE, SummaryAudience.RESEARCH): _requirements(
        "Be factual and objective",
        "Include statistical details",
        "Use appropriate terminology for data",
        "Focus on data patterns and trends",
        "Maintain neutral, scientific tone",
    ),
    (SummaryTone.PROFESSIONAL, SummaryAudience.PATIENT): _requirements(
        "Keep it professional but accessible (2-3 sentences)",
        "Use clear, neutral, non-technical language",
        "Present data in a straightforward, matter-of-fact manner",
        "Be informative and direct without emotion",
        "Focus strictly on the numbers and facts",
        'Avoid personal pronouns like "I" - use "your data shows" instead of "I see"',
        "Be informative without medical advice or warmth",
    ),
    (SummaryTone.PROFESSIONAL, SummaryAudience.DOCTOR): _requirements(
        "Use professional medical terminology for data",
        "Present data clearly and objectively",
        "Focus on recorded patterns and numbers",
        "Be concise and precise",
        "Maintain professional tone without clinical interpretation",
    ),
    (SummaryTone.PROFESSIONAL, SummaryAudience.CAREGIVER): _requirements(
        "Be clear and professional",
        "Present data factually",
        "Focus on what was recorded",
        "Avoid care recommendations",
        "Balance professionalism with empathy",
    ),
    (SummaryTone.PROFESSIONAL, SummaryAudience.FAMILY): _requirements(
        "Use professional but understandable language",
        "Focus on the recorded data",
        "Present information clearly",
        "Avoid medical interpretations",
        "Be informative without medical advice",
    ),
    (SummaryTone.PROFESSIONAL, SummaryAudience.RESEARCH): _requirements(
        "Use scientific and appropriate terminology",
        "Be precise and objective",
        "Include relevant statistical measures",
        "Focus on data patterns",
        "Maintain academic tone",
    ),
    (SummaryTone.CLINICAL, SummaryAudience.PATIENT): _requirements(
        "Use clinical language but explain clearly",
        "Focus on the recorded data facts",
        "Be direct but not harsh",
        "Present data objectively",
        "Maintain professional tone without medical interpretation",
    ),
    (SummaryTone.CLINICAL, SummaryAudience.DOCTOR): _requirements(
        "Use precise clinical terminology for data",
        "Include all relevant recorded details",
        "Focus on data patterns and numbers",
        "Be comprehensive but concise",
        "Maintain formal tone without clinical assessment",
    ),
    (SummaryTone.CLINICAL, SummaryAudience.CAREGIVER): _requirements(
        "Use clinical language with explanations",
        "Focus on what the data shows",
        "Present information clearly",
        "Be informative about recorded data",
        "Maintain professional tone without care recommendations",
    ),
    (SummaryTone.CLINICAL, SummaryAudience.FAMILY): _requirements(
        "Use clinical terms but explain them",
        "Focus on the recorded data",
        "Present information clearly",
        "Be informative but not alarming",
        "Maintain professional tone without medical advice",
    ),
    (SummaryTone.CLINICAL, SummaryAudience.RESEARCH): _requirements(
        "Use formal clinical and scientific language",
        "Include comprehensive data details",
        "Focus on data patterns and statistical significance",
        "Be precise and technical",
        "Maintain academic tone",
    ),
    (SummaryTone.ENCOURAGING, SummaryAudience.PATIENT): _requirements(
        "Keep it positive, upbeat, and motivating (3-4 sentences)",
        "Use enthusiastic, uplifting language with exclamation points where appropriate",
        'Celebrate their effort in tracking with phrases like "Great job!" or '
        '"Keep it up!"',
        "Focus on their commitment and dedication to tracking",
        "Make them feel accomplished and empowered",
        'Use encouraging words like "fantastic", "excellent", "you\'re doing great"',
        "Be genuinely enthusiastic about their data collection efforts",
        "Maintain optimistic, cheerful tone without medical advice",
    ),
    (SummaryTone.ENCOURAGING, SummaryAudience.DOCTOR): _requirements(
        "Balance encouragement with data accuracy",
        "Focus on positive aspects of data collection",
        "Use professional but supportive language",
        "Highlight data value",
        "Maintain encouraging professional tone without clinical interpretation",
    ),
    (SummaryTone.ENCOURAGING, SummaryAudience.CAREGIVER): _requirements(
        "Be encouraging and supportive",
        "Focus on the value of data tracking",
        "Provide motivation about data collection",
        "Be uplifting about monitoring efforts",
        "Maintain positive, supportive tone without care recommendations",
    ),
    (SummaryTone.ENCOURAGING, SummaryAudience.FAMILY): _requirements(
        "Use encouraging and hopeful language",
        "Focus on the importance of data tracking",
        "Be uplifting and motivating about monitoring",
        "Encourage family support of tracking",
        "Maintain positive, supportive tone without medical advice",
    ),
    (SummaryTone.ENCOURAGING, SummaryAudience.RESEARCH): _requirements(
        "Be encouraging about research potential",
        "Focus on positive data collection aspects",
        "Use optimistic scientific language",
        "Highlight data value for research",
        "Maintain encouraging academic tone",
    ),
    (SummaryTone.FACTUAL, SummaryAudience.PATIENT): _requirements(
        "Present facts in a dry, neutral manner (1-2 sentences only)",
        "Use simple, clear language without any emotion or warmth",
        "State only the numbers and facts - nothing more",
        'Avoid ALL personal language ("I", "you", emotional words)',
        "Be extremely straightforward and brief",
        "Use passive voice or third person",
        "Sound like a data report, not a conversation",
        "Be informative and straightforward without medical interpretation",
    ),
    (SummaryTone.FACTUAL, SummaryAudience.DOCTOR): _requirements(
        "Present data facts precisely",
        "Use appropriate medical terminology for data",
        "Focus on recorded information",
        "Be objective and comprehensive",
        "Maintain factual accuracy without clinical assessment",
    ),
    (SummaryTone.FACTUAL, SummaryAudience.CAREGIVER): _requirements(
        "Present facts clearly about recorded data",
        "Use clear, practical language",
        "Focus on what was recorded",
        "Be objective about data",
        "Maintain factual, helpful tone without care recommendations",
    ),
    (SummaryTone.FACTUAL, SummaryAudience.FAMILY): _requirements(
        "Present information clearly and simply",
        "Use understandable language",
        "Focus on recorded data facts",
        "Be objective and informative",
        "Maintain clear, factual tone without medical advice",
    ),
    (SummaryTone.FACTUAL, SummaryAudience.RESEARCH): _requirements(
        "Present data objectively and precisely",
        "Use scientific and statistical language",
        "Focus on research-relevant data",
        "Be comprehensive and accurate",
        "Maintain rigorous academic tone",
    ),
}


def tone_guidance(tone: SummaryTone) -> str:
    return TONE_GUIDANCE.get(tone, TONE_GUIDANCE[DEFAULT_TONE])


def audience_context(audience: SummaryAudience) -> str:
    return AUDIENCE_CONTEXT.get(audience, AUDIENCE_CONTEXT[DEFAULT_AUDIENCE])


def summary_requirements(tone: SummaryTone, audience: SummaryAudience) -> str:
    """Requirements block for a tone/audience pair, defaulting to compassionate/patient."""
    return SUMMARY_REQUIREMENTS.get(
        (tone, audience),
        SUMMARY_REQUIREMENTS[(DEFAULT_TONE, DEFAULT_AUDIENCE)],
    )


def format_prompt_date(value: datetime) -> str:
    """Render a date as "Jan 5, 2024" independent of the process locale."""
    return f"{_MONTH_ABBREVIATIONS[value.month - 1]} {value.day}, {value.year}"


def _data_context(
    *,
    period: str,
    region: str,
    frequency: int,
    median_score: float | None,
    date_range: DateRange | None,
) -> str:
    lines = ["Data Context:", f"- Time Period: {period}"]
    if date_range is not None:
        lines.append(
            f"- Specific Date Range: {format_prompt_date(date_range.start)} to "
            f"{format_prompt_date(date_range.end)}"
        )
    lines.append(f"- Body Region: {region}")
    lines.append(f"- Number of pain entries: {frequency}")
    if median_score is not None:
        lines.append(f"- Median pain score: {format_score(median_score)}/10")
    return "\n".join(lines)


def _no_data_prompt(
    *,
    period: str,
    region: str,
    tone: SummaryTone,
    audience: SummaryAudience,
    date_range: DateRange | None,
) -> str:
    sections = [
        f"You are a data analysis AI assistant. Generate a {tone} summary about pain "
        f"tracking data for a {audience}.",
        tone_guidance(tone),
        _data_context(
            period=period,
            region=region,
            frequency=0,
            median_score=None,
            date_range=date_range,
        ),
        "CRITICAL: The number of entries is ZERO (0). This means the user has NOT LOGGED "
        "ANY DATA for this region during this period.\n"
        f"They have not tracked or recorded any pain for the {region} region yet. The "
        "absence of entries says nothing about the absence of pain.",
        "DO NOT say:\n"
        '- "You experienced no pain" or "You\'re pain-free"\n'
        '- "That\'s wonderful" or congratulate them\n'
        "- Anything that implies they had pain but it was low",
        "DO say:\n"
        f'- "You haven\'t logged any data yet for {region}"\n'
        f'- "No entries have been recorded for {region}"\n'
        f'- "You haven\'t tracked {region} pain during this period"',
        audience_context(audience),
        summary_requirements(tone, audience),
        SAFETY_CLAUSE,
        f"The tone you use MUST be distinctly {tone}. Generate a brief summary (1-2 "
        "sentences) explaining that no data has been logged yet for this region:",
    ]
    return "\n\n".join(sections)


def build_summary_prompt(
    *,
    period: str,
    region: str,
    frequency: int,
    median_score: float,
    tone: SummaryTone = DEFAULT_TONE,
    audience: SummaryAudience = DEFAULT_AUDIENCE,
    date_range: DateRange | None = None,
) -> str:
    if frequency == 0:
        return _no_data_prompt(
            period=period,
            region=region,
            tone=tone,
            audience=audience,
            date_range=date_range,
        )

    sections = [
        f"You are a data analysis AI assistant. Generate a {tone} summary about pain "
        f"tracking data for a {audience}.",
        tone_guidance(tone),
        _data_context(
            period=period,
            region=region,
            frequency=frequency,
            median_score=median_score,
            date_range=date_range,
        ),
        audience_context(audience),
        summary_requirements(tone, audience),
        SAFETY_CLAUSE,
    ]
    if date_range is not None:
        sections.append(
            f"Include both the relative time period ({period}) and the specific dates "
            f"({format_prompt_date(date_range.start)} to {format_prompt_date(date_range.end)}) "
            "in your summary."
        )
    sections.append(
        f"The tone you use MUST be distinctly {tone}. Make sure your language clearly "
        "reflects this tone. Generate your summary now:"
    )
    return "\n\n".join(sections)
