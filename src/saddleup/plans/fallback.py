"""
SaddleUp - Fallback training plan.

A hand-authored curriculum used when AI plan generation fails or returns
an unusable plan. Pure and deterministic: no I/O, never raises.

Always two phases (Foundation & Safety, Building Connection). Riders who
want to learn to ride and are past the beginner stages get a third phase,
Preparation for Riding.
"""

from saddleup.plans.models import LessonTemplate, Module, OnboardingData, Phase, TrainingPlanStructure
from saddleup.plans.prompts import GOAL_DESCRIPTIONS

DEFAULT_GOAL_DESCRIPTION = GOAL_DESCRIPTIONS["groundwork_only"]
BEGINNER_LEVELS = frozenset({"complete_beginner", "some_experience"})


def _safety_basics() -> Module:
    return Module(
        module_number=1,
        module_name="Safety Basics",
        description="Essential safety practices and horse behavior understanding.",
        lessons=[
            LessonTemplate(
                lesson_number=1,
                title="Understanding Horse Body Language",
                objective="Learn to read basic horse signals and understand when a horse is relaxed, alert, or stressed.",
                equipment=["Notebook", "Safe observation area"],
                instructions=[
                    "Observe horses from a safe distance (at least 10 feet away)",
                    "Watch for ear position (forward = alert/curious, pinned back = upset)",
                    "Notice tail position (swishing = irritation, relaxed = calm)",
                    "Observe head height (high = alert/stressed, low = relaxed)",
                    "Watch for signs of relaxation: lowered head, soft eyes, relaxed stance",
                    "Practice identifying at least 3 different emotional states",
                ],
                safety_notes=[
                    "Always maintain safe distance when observing unfamiliar horses",
                    "Never approach a horse from directly behind",
                    "Watch for warning signs: pinned ears, swishing tail, raised head",
                ],
                common_mistakes=[
                    "Getting too close too quickly",
                    "Misreading friendly curiosity as aggression",
                    "Ignoring subtle warning signs",
                ],
                move_on_when=[
                    "You can identify at least 5 different body language signals",
                    "You feel confident recognizing relaxed vs. stressed states",
                ],
                requires_professional_help=False,
            ),
            LessonTemplate(
                lesson_number=2,
                title="Approaching and Greeting a Horse Safely",
                objective="Learn the correct way to approach and greet a horse to build trust and ensure safety.",
                equipment=["Halter", "Lead rope", "Treats (optional)"],
                instructions=[
                    "Approach from the side, never directly from front or behind",
                    "Speak softly as you approach to let the horse know you're there",
                    "Approach at a slight angle, stopping about 3-4 feet away",
                    "Extend your hand slowly, palm down, fingers together",
                    "Let the horse sniff your hand before attempting to touch",
                    "If the horse steps away, pause and wait for them to return",
                    "Once accepted, gently stroke the neck or shoulder",
                ],
                safety_notes=[
                    "Always approach from the side, never directly in front",
                    "Keep your hand flat, fingers together (never make a fist)",
                    "Watch the horse's ears and body language",
                    "If the horse pins ears or shows stress, back away slowly",
                ],
                common_mistakes=[
                    "Approaching too quickly or directly",
                    "Making sudden movements",
                    "Reaching for the head before the horse is ready",
                ],
                move_on_when=[
                    "You can approach and greet a horse calmly",
                    "The horse accepts your approach without stress signals",
                ],
                requires_professional_help=False,
            ),
            LessonTemplate(
                lesson_number=3,
                title="Personal Space and Boundaries",
                objective="Establish respectful boundaries and understand the horse's personal space bubble.",
                equipment=["Lead rope", "Safe enclosed area"],
                instructions=[
                    "Stand at a comfortable distance (about 3-4 feet) from the horse",
                    "Practice moving closer and further away, observing the horse's response",
                    "Learn to recognize when a horse is comfortable vs. uncomfortable with your proximity",
                    "Practice asking the horse to step back by using body language (not force)",
                    "Respect when the horse needs more space",
                ],
                safety_notes=[
                    "Always respect a horse's need for space",
                    "Never corner a horse or block escape routes",
                    "Watch for signs of discomfort: pinned ears, shifting weight away",
                ],
                common_mistakes=[
                    "Invading the horse's space too quickly",
                    "Ignoring the horse's signals for more space",
                    "Cornering or trapping the horse",
                ],
                move_on_when=[
                    "You can read when a horse needs more space",
                    "You can respectfully ask a horse to step back using body language",
                ],
                requires_professional_help=False,
            ),
        ],
    )


def _basic_handling() -> Module:
    return Module(
        module_number=2,
        module_name="Basic Handling",
        description="Fundamental skills for safely handling horses on the ground.",
        lessons=[
            LessonTemplate(
                lesson_number=1,
                title="Putting on a Halter",
                objective="Learn to safely put a halter on a horse.",
                equipment=["Halter", "Lead rope"],
                instructions=[
                    "Approach the horse calmly from the side",
                    "Hold the halter in your left hand, unbuckled",
                    "Place your right arm over the horse's neck",
                    "Gently guide the noseband over the nose",
                    "Bring the crown piece over the ears",
                    "Fasten the buckle securely but not too tight",
                    "Check that the halter fits properly (two fingers should fit between halter and face)",
                ],
                safety_notes=[
                    "Never stand directly in front of the horse",
                    "Keep your body to the side",
                    "If the horse moves away, don't force it - pause and try again",
                ],
                common_mistakes=[
                    "Putting the halter on backwards",
                    "Making it too tight or too loose",
                    "Rushing the process",
                ],
                move_on_when=[
                    "You can put a halter on calmly and correctly",
                    "The horse accepts the halter without stress",
                ],
                requires_professional_help=False,
            ),
            LessonTemplate(
                lesson_number=2,
                title="Leading Basics",
                objective="Learn to lead a horse safely and respectfully.",
                equipment=["Halter", "Lead rope"],
                instructions=[
                    "Hold the lead rope in your right hand, about 12-18 inches from the halter",
                    "Keep the excess rope coiled in your left hand (never wrap around your hand)",
                    "Walk beside the horse's shoulder, not in front or behind",
                    "Use gentle pressure and release to ask the horse to move",
                    "Stop and wait if the horse stops",
                    "Practice walking, stopping, and turning",
                ],
                safety_notes=[
                    "Never wrap the lead rope around your hand, wrist, or body",
                    "Stay beside the horse's shoulder, not directly in front",
                    "Watch where you're walking to avoid tripping",
                ],
                common_mistakes=[
                    "Pulling or dragging the horse",
                    "Walking too far ahead or behind",
                    "Wrapping the rope around your hand",
                ],
                move_on_when=[
                    "You can lead the horse forward, stop, and turn smoothly",
                    "The horse follows willingly without constant pulling",
                ],
                requires_professional_help=False,
            ),
        ],
    )


def _groundwork_exercises() -> Module:
    return Module(
        module_number=1,
        module_name="Groundwork Exercises",
        description="Basic groundwork exercises to build communication and respect.",
        lessons=[
            LessonTemplate(
                lesson_number=1,
                title="Backing Up",
                objective="Teach the horse to back up on command, establishing respect for your space.",
                equipment=["Halter", "Lead rope"],
                instructions=[
                    "Stand facing the horse, about 3-4 feet away",
                    "Hold the lead rope with gentle contact",
                    "Apply gentle backward pressure on the lead rope",
                    "As soon as the horse takes even one step back, release the pressure immediately",
                    "Repeat, asking for one step at a time",
                    "Gradually build up to asking for 2-3 steps back",
                ],
                safety_notes=[
                    "Never pull hard or jerk the rope",
                    "Release pressure immediately when the horse responds",
                    "Stay aware of your position - don't get too close",
                ],
                common_mistakes=[
                    "Pulling too hard or continuously",
                    "Not releasing pressure when the horse responds",
                    "Getting frustrated and forcing the movement",
                ],
                move_on_when=[
                    "The horse backs up willingly with light pressure",
                    "You can ask for 2-3 steps back consistently",
                ],
                requires_professional_help=False,
            ),
            LessonTemplate(
                lesson_number=2,
                title="Moving the Hindquarters",
                objective="Learn to move the horse's hindquarters, establishing control and respect.",
                equipment=["Halter", "Lead rope"],
                instructions=[
                    "Stand beside the horse's shoulder, facing the hindquarters",
                    "Apply gentle pressure to the horse's side with your hand or a training stick",
                    "As soon as the horse moves the hindquarters away, release the pressure",
                    "Practice moving both hindquarters left and right",
                    "Keep the horse's front feet relatively still while moving the hindquarters",
                ],
                safety_notes=[
                    "Stay to the side, never directly behind the horse",
                    "Use gentle pressure, not force",
                    "Watch the horse's body language for signs of stress",
                ],
                common_mistakes=[
                    "Using too much pressure",
                    "Standing in an unsafe position",
                    "Not releasing pressure when the horse responds",
                ],
                move_on_when=[
                    "You can move the hindquarters left and right with light pressure",
                    "The horse responds willingly without stress",
                ],
                requires_professional_help=False,
            ),
        ],
    )


def _preparation_for_riding() -> Phase:
    return Phase(
        phase_number=3,
        phase_name="Preparation for Riding",
        description="Preparing for your first mounted experiences.",
        modules=[
            Module(
                module_number=1,
                module_name="Pre-Riding Skills",
                description="Essential skills before getting in the saddle.",
                lessons=[
                    LessonTemplate(
                        lesson_number=1,
                        title="Introduction to Tack",
                        objective="Learn about basic riding equipment and how to handle it safely.",
                        equipment=["Saddle pad", "Saddle", "Bridle", "Girth"],
                        instructions=[
                            "Observe and handle each piece of equipment",
                            "Learn the names and purposes of each item",
                            "Practice placing a saddle pad on a horse (with supervision)",
                            "Learn to check equipment for safety (straps, buckles, etc.)",
                        ],
                        safety_notes=[
                            "Always check equipment before use",
                            "Never leave equipment unattended where a horse could get tangled",
                            "Work with an experienced person when first handling tack",
                        ],
                        common_mistakes=[
                            "Not checking equipment for damage",
                            "Placing equipment incorrectly",
                        ],
                        move_on_when=[
                            "You can identify all basic tack pieces",
                            "You understand basic safety checks",
                        ],
                        requires_professional_help=True,
                    ),
                ],
            ),
        ],
    )


def generate_fallback_plan(data: OnboardingData) -> TrainingPlanStructure:
    """
    Build the static curriculum for a rider.

    Args:
        data: The rider's onboarding answers

    Returns:
        A 2-phase plan, or 3 phases for non-beginners learning to ride
    """
    goal = GOAL_DESCRIPTIONS.get(data.primary_goal, DEFAULT_GOAL_DESCRIPTION)
    is_beginner = data.experience_level in BEGINNER_LEVELS

    phases = [
        Phase(
            phase_number=1,
            phase_name="Foundation & Safety",
            description=f"Building essential groundwork skills and safety awareness for {goal}.",
            modules=[_safety_basics(), _basic_handling()],
        ),
        Phase(
            phase_number=2,
            phase_name="Building Connection",
            description="Developing trust and communication with your horse.",
            modules=[_groundwork_exercises()],
        ),
    ]

    if data.primary_goal == "learn_to_ride" and not is_beginner:
        phases.append(_preparation_for_riding())

    return TrainingPlanStructure(phases=phases)
