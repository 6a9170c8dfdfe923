"""
SaddleUp - CLI Entry Point.

Usage:
    saddleup ask "..."           Ask the horsemanship coach one question
    saddleup chat                Start an interactive coaching session
    saddleup plan                Generate a training plan (AI with fallback)
    saddleup fallback-plan       Print the built-in training plan
    saddleup health              Check configuration
"""

import asyncio
import json
import logging

import typer
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.spinner import Spinner
from rich.tree import Tree

app = typer.Typer(
    name="saddleup",
    help="SaddleUp - AI horsemanship coaching.",
    add_completion=False,
)
console = Console()


def _setup(log_prompts: bool) -> None:
    from saddleup.config import settings
    from saddleup.llm.prompt_logger import enable_prompt_logging

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if log_prompts or settings.saddleup_log_prompts:
        enable_prompt_logging(True)


def _print_log_dir() -> None:
    from saddleup.llm.prompt_logger import get_session_log_dir

    log_dir = get_session_log_dir()
    if log_dir:
        console.print(f"\n[dim]📝 Prompts logged to: {log_dir}[/dim]")


def _print_reply(response) -> None:
    console.print(f"\n[bold green]SaddleUp:[/bold green] {response.content}")
    analysis = response.media_analysis
    if analysis and analysis.has_video_timestamps:
        console.print("\n[bold]Video moments:[/bold]")
        for ref in analysis.timestamp_references:
            console.print(f"  [cyan]{ref.timestamp}[/cyan] ({ref.type}) {ref.text}")


def _print_plan(plan, title: str) -> None:
    tree = Tree(f"[bold]{title}[/bold]")
    for phase in plan.phases:
        phase_node = tree.add(f"[green]Phase {phase.phase_number}: {phase.phase_name}[/green]")
        for module in phase.modules:
            module_node = phase_node.add(f"Module {module.module_number}: {module.module_name}")
            for lesson in module.lessons:
                module_node.add(f"[dim]{lesson.lesson_number}.[/dim] {lesson.title}")
    console.print(tree)


@app.command()
def ask(
    message: str = typer.Argument(..., help="Message to send to the coach"),
    horse_id: str = typer.Option(None, "--horse", help="Horse the question is about"),
    facility_id: str = typer.Option(None, "--facility", help="Facility in question"),
    media: list[str] = typer.Option(None, "--media", "-m", help="Attached photo/video URL (repeatable)"),
    log_prompts: bool = typer.Option(False, "--log-prompts", "-l", help="Log all LLM prompts to prompt_logs/"),
) -> None:
    """Send a single message to the coach (useful for testing)."""
    from saddleup.chat.service import answer_message
    from saddleup.config import settings

    _setup(log_prompts)

    with Live(Spinner("dots", text="Thinking..."), console=console, transient=True):
        response = asyncio.run(answer_message(
            user_id=settings.dev_user_id,
            content=message,
            conversation_history=[],
            media_urls=media or None,
            horse_id=horse_id,
            facility_id=facility_id,
        ))

    _print_reply(response)

    if log_prompts:
        _print_log_dir()


@app.command()
def chat(
    horse_id: str = typer.Option(None, "--horse", help="Horse the session is about"),
    log_prompts: bool = typer.Option(False, "--log-prompts", "-l", help="Log all LLM prompts to prompt_logs/"),
) -> None:
    """Start an interactive coaching session."""
    from saddleup.chat.service import answer_message
    from saddleup.config import settings

    _setup(log_prompts)
    if log_prompts:
        console.print("[dim]📝 Prompt logging enabled. Check prompt_logs/ after the session.[/dim]")

    console.print(
        Panel.fit(
            "[bold green]SaddleUp[/bold green]\n"
            "Your horsemanship coach.\n\n"
            "[dim]Type 'exit' or 'quit' to end the session.[/dim]",
            title="Welcome",
            border_style="green",
        )
    )

    history: list[dict[str, str]] = []

    while True:
        try:
            user_input = console.input("\n[bold blue]You:[/bold blue] ").strip()

            if user_input.lower() in ("exit", "quit", "q"):
                console.print("\n[dim]Happy trails! 🐴[/dim]")
                break

            if not user_input:
                continue

            with Live(Spinner("dots", text="Thinking..."), console=console, transient=True):
                response = asyncio.run(answer_message(
                    user_id=settings.dev_user_id,
                    content=user_input,
                    conversation_history=history,
                    horse_id=horse_id,
                ))

            _print_reply(response)
            history.append({"role": "user", "content": user_input})
            history.append({"role": "assistant", "content": response.content})

        except KeyboardInterrupt:
            console.print("\n\n[dim]Session interrupted. Happy trails! 🐴[/dim]")
            break
        except Exception as e:
            console.print(f"\n[red]Error: {e}[/red]")


def _onboarding(
    experience_level: str,
    primary_goal: str,
    days_per_week: int,
    session_length: int,
    owns_horse: bool,
    horse_details: str | None,
):
    from pydantic import ValidationError

    from saddleup.plans.models import OnboardingData

    try:
        return OnboardingData(
            experience_level=experience_level,
            primary_goal=primary_goal,
            days_per_week=days_per_week,
            session_length=session_length,
            owns_horse=owns_horse,
            horse_details=horse_details,
        )
    except ValidationError as e:
        console.print(f"[red]❌ Invalid onboarding answers:[/red]\n{e}")
        raise typer.Exit(1)


@app.command()
def plan(
    experience_level: str = typer.Option("complete_beginner", "--experience", "-e"),
    primary_goal: str = typer.Option("learn_to_ride", "--goal", "-g"),
    days_per_week: int = typer.Option(3, "--days"),
    session_length: int = typer.Option(60, "--minutes"),
    owns_horse: bool = typer.Option(False, "--owns-horse"),
    horse_details: str = typer.Option(None, "--horse-details"),
    as_json: bool = typer.Option(False, "--json", help="Print the plan as JSON"),
    log_prompts: bool = typer.Option(False, "--log-prompts", "-l", help="Log all LLM prompts to prompt_logs/"),
) -> None:
    """Generate a personalized training plan, falling back to the built-in plan."""
    from saddleup.plans.service import generate_plan_with_fallback

    _setup(log_prompts)
    data = _onboarding(experience_level, primary_goal, days_per_week, session_length, owns_horse, horse_details)

    with Live(Spinner("dots", text="Building your plan..."), console=console, transient=True):
        result = asyncio.run(generate_plan_with_fallback(data))

    if as_json:
        console.print_json(json.dumps(result.plan.to_dict()))
    else:
        _print_plan(result.plan, f"Training plan ({result.source})")

    if result.error:
        console.print(f"\n[yellow]⚠️  AI generation failed, showing built-in plan: {result.error}[/yellow]")

    if log_prompts:
        _print_log_dir()


@app.command("fallback-plan")
def fallback_plan(
    experience_level: str = typer.Option("complete_beginner", "--experience", "-e"),
    primary_goal: str = typer.Option("learn_to_ride", "--goal", "-g"),
    days_per_week: int = typer.Option(3, "--days"),
    session_length: int = typer.Option(60, "--minutes"),
    owns_horse: bool = typer.Option(False, "--owns-horse"),
    as_json: bool = typer.Option(False, "--json", help="Print the plan as JSON"),
) -> None:
    """Print the built-in training plan (no model call)."""
    from saddleup.plans.fallback import generate_fallback_plan

    data = _onboarding(experience_level, primary_goal, days_per_week, session_length, owns_horse, None)
    result = generate_fallback_plan(data)

    if as_json:
        console.print_json(json.dumps(result.to_dict()))
    else:
        _print_plan(result, "Built-in training plan")


@app.command()
def health() -> None:
    """Check system health and configuration."""
    from saddleup import __version__
    from saddleup.config import get_settings

    console.print(f"\n[bold]SaddleUp {__version__} Health Check[/bold]\n")

    try:
        settings = get_settings()
        console.print("✅ Configuration loaded")
        console.print(f"   Environment: {settings.saddleup_env}")
        console.print(f"   Log level: {settings.log_level}")

        console.print(f"✅ Model endpoint: {settings.llm_base_url}")
        console.print(f"   Chat model: {settings.llm_chat_model}, plan model: {settings.llm_plan_model}")
        console.print(f"   Timeout: {settings.llm_timeout_seconds}s, retries: {settings.llm_max_retries}")

        if settings.supabase_url and settings.supabase_url.startswith("https://") and settings.supabase_anon_key:
            console.print("✅ Supabase configured")
        else:
            console.print("ℹ️  Supabase not configured - rider context lookups will fail")

        console.print("\n[green]All checks passed![/green]")

    except Exception as e:
        console.print(f"\n[red]❌ Configuration error: {e}[/red]")
        console.print("[dim]Make sure you have a .env file with LLM_API_KEY set.[/dim]")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
