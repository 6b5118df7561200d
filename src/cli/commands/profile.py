"""Style profile CLI commands: merge, refine, show, reset."""

import json
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from cli.utils import get_analyzer, get_config, get_profile_storage, read_json_file, read_messages

console = Console()


def _print_profile(p):
    w = p.writing
    console.print(f"\n[cyan bold]Style profile[/] [dim]{p.user_id} v{p.version}[/]")

    table = Table(show_header=True)
    table.add_column("Attribute")
    table.add_column("Value")
    table.add_column("Confidence", justify="right")
    rows = [
        ("tone", str(w.tone)),
        ("formality", str(w.formality)),
        ("sentenceLength", str(w.sentence_length)),
        ("vocabulary", ", ".join(w.vocabulary) or "-"),
        ("avoidance", ", ".join(w.avoidance)),
    ]
    for attr, value in rows:
        conf = p.attribute_confidence.get(attr)
        table.add_row(attr, value, f"{conf:.2f}" if conf is not None else "-")
    console.print(table)

    console.print(f"[bold]Overall confidence:[/] {p.confidence:.2f}")
    words = ", ".join(f"{k}={v}" for k, v in p.sample_count.items() if v)
    if words:
        console.print(f"[dim]Words: {words}[/]")
    meta = p.learning_metadata
    console.print(
        f"[dim]Refinements: {meta.total_refinements} | "
        f"learning {'on' if meta.enabled else 'off'}[/]"
    )
    if p.last_updated:
        console.print(f"[dim]Last updated: {p.last_updated[:19]}[/]")


@click.command("merge")
@click.argument("sources_file", type=click.Path(allow_dash=True, path_type=Path))
@click.option("-u", "--user", "user_id", default="default", help="Profile owner")
@click.option("--fresh", is_flag=True, help="Ignore any stored profile and start over")
def merge(sources_file: Path, user_id: str, fresh: bool):
    """Merge source samples (JSON list) into the user's style profile."""
    from style.merger import build_style_profile

    config = get_config()
    data = read_json_file(sources_file)
    samples = data.get("sources", []) if isinstance(data, dict) else data
    if not isinstance(samples, list):
        console.print("[red]Expected a JSON list of source samples[/]")
        sys.exit(1)
    if len(samples) > config.merge.max_sources:
        console.print(f"[red]Too many sources:[/] {len(samples)} > {config.merge.max_sources}")
        sys.exit(1)

    storage = get_profile_storage(user_id, config)
    current = None if fresh else storage.load()
    profile = build_style_profile(samples, user_id=user_id, current=current)
    stored = storage.save(profile)

    console.print(f"[green]Merged[/] {len(samples)} source(s) into {storage.path}")
    if not stored.source_attribution:
        console.print("[yellow]No usable samples; saved low-confidence default profile.[/]")
    _print_profile(stored)


@click.command("refine")
@click.argument("messages_file", type=click.Path(allow_dash=True, path_type=Path))
@click.option("-u", "--user", "user_id", default="default", help="Profile owner")
@click.option("--filter/--no-filter", "use_filter", default=True,
              help="Drop short messages (<10 words, no code)")
def refine(messages_file: Path, user_id: str, use_filter: bool):
    """Refine the stored profile with conversation messages, one batch at a time."""
    from style.collector import MessageCollector, collect_batches
    from style.refiner import ProfileRefiner

    config = get_config()
    storage = get_profile_storage(user_id, config)
    current = storage.load()
    if not current:
        console.print("[yellow]No profile found. Run [cyan]digitalme merge[/] first.[/]")
        sys.exit(1)
    if not current.learning_metadata.enabled:
        console.print("[yellow]Learning is off for this profile; nothing refined.[/]")
        return

    collector = MessageCollector(quality_filter=use_filter)
    batches = collect_batches(read_messages(messages_file), collector)
    if not batches:
        console.print("[yellow]No messages passed the quality filter.[/]")
        return

    refiner = ProfileRefiner(get_analyzer(config))
    profile = current
    table = Table(title="Changes", show_header=True)
    table.add_column("Batch", justify="right")
    table.add_column("Attribute")
    table.add_column("Before")
    table.add_column("After")
    table.add_column("Change", justify="right")
    words = 0
    changed = False
    for i, batch in enumerate(batches, 1):
        result = refiner.refine(profile, batch)
        profile = result.updated_profile
        report = result.delta_report
        words += report.words_analyzed
        for c in report.changes:
            changed = True
            table.add_row(str(i), c.attribute, c.old_value, c.new_value, f"{c.change_percent}%")

    stored = storage.save(profile)

    messages = sum(len(b) for b in batches)
    console.print(
        f"[green]Refined[/] with {messages} message(s) in {len(batches)} batch(es), {words} words"
    )
    if changed:
        console.print(table)
    else:
        console.print("[dim]No attribute changed.[/]")
    console.print(f"[bold]Confidence change:[/] {stored.confidence - current.confidence:+.2f}")


@click.command("show")
@click.option("-u", "--user", "user_id", default="default", help="Profile owner")
@click.option("--json", "as_json", is_flag=True, help="Print the raw document")
def show(user_id: str, as_json: bool):
    """Show the stored style profile."""
    p = get_profile_storage(user_id).load()
    if not p:
        console.print("[yellow]No profile found. Run [cyan]digitalme merge[/] to create one.[/]")
        return
    if as_json:
        click.echo(json.dumps(p.to_document(), indent=2))
        return
    _print_profile(p)


@click.command("reset")
@click.option("-u", "--user", "user_id", default="default", help="Profile owner")
@click.option("--yes", is_flag=True, help="Skip confirmation")
def reset(user_id: str, yes: bool):
    """Delete the stored style profile."""
    storage = get_profile_storage(user_id)
    if not storage.exists():
        console.print("[yellow]No profile to reset.[/]")
        return
    if not yes and not click.confirm(f"Delete profile at {storage.path}?"):
        console.print("[dim]Cancelled.[/]")
        return
    storage.reset()
    console.print(f"[green]Deleted[/] {storage.path}")
