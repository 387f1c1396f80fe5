import asyncio
import json

import typer
from rich.console import Console
from rich.table import Table

console = Console()
cli_app = typer.Typer(name="promptek-admin", help="PrompTek administrative CLI")


def _run_async(coro):
    """Run async code from sync CLI context."""
    return asyncio.run(coro)


async def _load_summary(user_id: str, timeframe: str):
    from datetime import datetime

    from app.config import settings
    from app.core.database import build_engine, build_session_factory
    from app.services.analytics import AnalyticsRepository, summarize

    engine = build_engine(settings.promptek_db_url)
    try:
        repository = AnalyticsRepository(build_session_factory(engine))
        now = datetime.now().astimezone()
        snapshot = await repository.fetch(user_id, timeframe, now=now)
        return summarize(snapshot.prompts, snapshot.optimizations, snapshot.chat_sessions, now=now)
    finally:
        await engine.dispose()


@cli_app.command("summary")
def summary(
    user_id: str = typer.Option(..., "--user-id", help="User whose activity to summarize"),
    timeframe: str = typer.Option("7d", "--timeframe", help="Window: 1d, 7d or 30d"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw JSON summary"),
):
    """Print a user's analytics summary."""
    result = _run_async(_load_summary(user_id, timeframe))

    if as_json:
        console.print_json(json.dumps(result.model_dump(mode="json", by_alias=True)))
        return

    overview = result.overview
    console.print(f"\n[bold]Analytics for {user_id}[/bold] ({timeframe})\n")
    console.print(f"  Prompts:        {overview.total_prompts} ({overview.completed_prompts} completed)")
    console.print(f"  Average score:  {overview.average_score}")
    console.print(f"  Success rate:   {overview.success_rate}%")
    console.print(f"  Optimizations:  {overview.total_optimizations}")
    console.print(f"  Tokens used:    {overview.total_tokens_used} ({result.usage.token_analytics.trend})")
    console.print(f"  Chat sessions:  {overview.total_chat_sessions}")
    console.print(f"  Score trend:    {result.performance.improvement_trend}\n")

    table = Table(title="Last 7 days")
    table.add_column("Date", style="cyan")
    table.add_column("Prompts", justify="right")
    table.add_column("Optimizations", justify="right")
    table.add_column("Avg score", justify="right", style="green")
    table.add_column("Avg gen. time (ms)", justify="right")

    for day in result.performance.daily_stats:
        table.add_row(
            day.date,
            str(day.prompt_count),
            str(day.optimization_count),
            f"{day.avg_score:.2f}",
            f"{day.avg_generation_time_ms:.0f}",
        )
    console.print(table)

    if result.insights:
        console.print("\n[bold]Insights[/bold]")
        for insight in result.insights:
            console.print(f"  {insight}")
    console.print()


@cli_app.command("render-email")
def render_email(
    kind: str = typer.Argument(help="signup, password_reset or email_change"),
    email: str = typer.Option("user@example.com", "--email"),
    code: str = typer.Option("123456", "--code"),
):
    """Print the subject and HTML of a verification email."""
    from pydantic import ValidationError

    from app.schemas.email import VerificationEmailRequest
    from app.services.email.templates import render_verification_email

    try:
        payload = VerificationEmailRequest.model_validate({"type": kind, "email": email, "code": code})
    except ValidationError as exc:
        console.print(f"[yellow]Invalid email request: {exc.errors()[0]['msg']}[/yellow]")
        raise typer.Exit(code=1)

    rendered = render_verification_email(payload.root)
    console.print(f"[bold]Subject:[/bold] {rendered.subject}\n")
    console.print(rendered.html, markup=False)


def main():
    cli_app()


if __name__ == "__main__":
    main()
