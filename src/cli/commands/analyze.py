"""Text analysis CLI command."""

import asyncio
import json
import sys
from pathlib import Path

import click
from rich.console import Console

from cli.utils import get_analyzer, get_config

console = Console()


@click.command("analyze")
@click.argument("text_file", type=click.Path(allow_dash=True, path_type=Path))
@click.option("--llm", "use_llm", is_flag=True, help="Analyze with the LLM instead of heuristics")
@click.option("-t", "--type", "source_type", default="text",
              type=click.Choice(["gmail", "text", "blog", "github"]),
              help="Source type of the sample (LLM mode)")
@click.option("-o", "--output", type=click.Path(path_type=Path), help="Write sample JSON here")
def analyze(text_file: Path, use_llm: bool, source_type: str, output: Path | None):
    """Analyze a writing sample and print it as a source sample."""
    from analysis.heuristics import analyze_text_sample, validate_text_sample

    text = sys.stdin.read() if str(text_file) == "-" else text_file.read_text()
    problem = validate_text_sample(text, min_words=1 if use_llm else 100)
    if problem:
        console.print(f"[red]{problem}[/]")
        sys.exit(1)

    if use_llm:
        analyzer = get_analyzer(get_config())
        sample = asyncio.run(analyzer.analyze_to_sample(text, source_type))
    else:
        sample = analyze_text_sample(text)

    doc = sample.model_dump(by_alias=True, mode="json", exclude_none=True)
    rendered = json.dumps(doc, indent=2)
    if output:
        output.write_text(rendered)
        console.print(f"[green]Saved[/] sample to {output}")
    else:
        click.echo(rendered)
