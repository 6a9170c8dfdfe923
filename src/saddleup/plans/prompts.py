"""
SaddleUp - Training plan prompt.

The plan prompt embeds the rider's onboarding answers, the target JSON
schema, and the structural rules the curriculum must follow.
"""

from types import MappingProxyType

from saddleup.chat.prompts import EXPERIENCE_DESCRIPTIONS
from saddleup.plans.models import OnboardingData

GOAL_DESCRIPTIONS = MappingProxyType({
    "learn_to_ride": "learning to ride",
    "learn_to_drive": "learning to drive a cart behind a horse",
    "groundwork_only": "groundwork and horsemanship skills",
    "general_horsemanship": "general horse care and horsemanship",
})

PLAN_SYSTEM_PROMPT = (
    "You are an expert horse trainer and curriculum designer. "
    "Respond with a single valid JSON object and nothing else: "
    "no prose before or after it and no markdown code fences."
)

PLAN_JSON_SCHEMA = """{
  "phases": [
    {
      "phaseNumber": 1,
      "phaseName": "Foundation",
      "description": "...",
      "modules": [
        {
          "moduleNumber": 1,
          "moduleName": "...",
          "description": "...",
          "lessons": [
            {
              "lessonNumber": 1,
              "title": "...",
              "objective": "...",
              "equipment": ["..."],
              "instructions": ["..."],
              "safetyNotes": ["..."],
              "commonMistakes": ["..."],
              "moveOnWhen": ["..."],
              "requiresProfessionalHelp": false
            }
          ]
        }
      ]
    }
  ]
}"""

PLAN_RULES = """Create a comprehensive, progressive training plan with the following structure:
- Break the plan into 2-4 phases (Foundation, Building Skills, Refinement, etc.)
- Each phase should contain 2-4 modules
- Each module should contain 3-6 individual lessons
- Lessons must be specific, actionable, and age-appropriate
- Always start with foundational safety and horse behavior basics
- Never skip foundational skills
- Include review/reinforcement sessions regularly
- Flag lessons that require professional instruction (first canter, first time in cart, etc.) with "requiresProfessionalHelp": true
- Acknowledge that training isn't linear and horses have bad days

For each lesson, provide:
1. Clear objective
2. Required equipment
3. Step-by-step instructions (specific, not vague)
4. Safety notes
5. Common mistakes to avoid
6. Criteria for moving on to the next lesson"""


def _describe(table, key: str) -> str:
    return table.get(key, key.replace("_", " "))


def build_plan_prompt(data: OnboardingData) -> str:
    """Render the curriculum-generation prompt for one rider."""
    experience = _describe(EXPERIENCE_DESCRIPTIONS, data.experience_level)
    goal = _describe(GOAL_DESCRIPTIONS, data.primary_goal)

    if data.owns_horse:
        horse = "They own a horse."
        if data.horse_details:
            horse += f" Details: {data.horse_details}"
    else:
        horse = "They do not own a horse and will be taking lessons."

    return f"""You are an expert horse trainer and instructor creating a personalized training curriculum for {experience} who wants {goal}.

The student has {data.days_per_week} day(s) per week available for training, with sessions lasting {data.session_length} minutes each. {horse}

{PLAN_RULES}

Return your response as a JSON object with this exact structure:
{PLAN_JSON_SCHEMA}

Make sure the JSON is valid and parseable."""
