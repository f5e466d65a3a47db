"""
Persona CLI - Command-line interface for the persona corpus.

Usage:
    personas list --tool Bash
    personas info code-reviewer
    personas lint --fail-on warning
    personas rules
    personas delegations tech-lead-orchestrator
    personas template code-reviewer
    personas export --format yaml --output registry.yaml
    personas split unpacked/
"""

import logging
from pathlib import Path
from typing import Optional

import click

from agent_personas import __version__

SEVERITY_COLORS = {"error": "red", "warning": "yellow", "info": "cyan"}


class CorpusSession:
    """Config plus lazily loaded corpus for one CLI invocation."""

    def __init__(self, config):
        self.config = config
        self._result = None
        self._registry = None

    @property
    def result(self):
        if self._result is None:
            from agent_personas.personas import PersonaLoader

            corpus = self.config.corpus
            loader = PersonaLoader(corpus.corpus_dir, corpus.patterns, corpus.recursive)
            self._result = loader.load_all(strict=corpus.strict)
        return self._result

    @property
    def registry(self):
        if self._registry is None:
            from agent_personas.personas import PersonaRegistry

            self._registry = PersonaRegistry.from_personas(self.result.personas)
        return self._registry


def _fail(ctx: click.Context, message: str) -> None:
    click.echo(click.style(f"Error: {message}", fg="red"), err=True)
    ctx.exit(1)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--config", "config_path", type=click.Path(dir_okay=False, path_type=Path),
              help="Config file (default: ./personas.yaml)")
@click.option("--corpus", "corpus_dir", type=click.Path(file_okay=False, path_type=Path),
              help="Directory holding persona documents")
@click.version_option(version=__version__, prog_name="personas")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_path: Optional[Path], corpus_dir: Optional[Path]):
    """Persona corpus tools - load, lint and inspect agent personas."""
    from agent_personas.config import Config
    from agent_personas.errors import PersonaError

    try:
        config = Config.load(config_path)
    except PersonaError as e:
        _fail(ctx, str(e))
        return

    if corpus_dir is not None:
        config.corpus.corpus_dir = corpus_dir

    logging.basicConfig(
        level=logging.INFO if verbose else config.logging.log_level.upper(),
        format='%(name)s - %(levelname)s - %(message)s'
    )

    ctx.ensure_object(dict)
    ctx.obj["session"] = CorpusSession(config)


def _session(ctx: click.Context) -> CorpusSession:
    from agent_personas.errors import PersonaError

    session = ctx.obj["session"]
    try:
        session.registry
    except PersonaError as e:
        _fail(ctx, str(e))
    return session


@cli.command("list")
@click.option("--tool", help="Only personas allowed to use this tool")
@click.option("--search", "-s", help="Filter on id, name and summary")
@click.pass_context
def list_personas(ctx: click.Context, tool: Optional[str], search: Optional[str]):
    """List personas in the corpus."""
    registry = _session(ctx).registry

    personas = registry.search(search) if search else list(registry)
    if tool:
        personas = [p for p in personas if p.allows_tool(tool)]

    if not personas:
        click.echo("No personas found")
        return

    click.echo(f"\nPersonas ({len(personas)}):")
    for p in personas:
        summary = p.summary if len(p.summary) <= 70 else p.summary[:67] + "..."
        click.echo(f"  • {click.style(p.id, bold=True)}: {summary}")
    click.echo()


@cli.command()
@click.argument("persona_id")
@click.pass_context
def info(ctx: click.Context, persona_id: str):
    """Show persona details."""
    registry = _session(ctx).registry

    persona = registry.get(persona_id)
    if persona is None:
        _fail(ctx, f"Persona not found: {persona_id}")
        return

    summary = registry.summary(persona)
    click.echo(f"\n{persona.id}:")
    click.echo(f"  Name: {summary['name'] or '(missing)'}")
    click.echo(f"  Summary: {summary['summary']}")
    click.echo(f"  Tools: {summary['tools'] or '(none)'}")
    click.echo(f"  Trigger examples: {summary['examples']}")
    click.echo(f"  Delegates to: {', '.join(summary['delegates_to']) or '-'}")
    click.echo(f"  Delegated from: {', '.join(summary['delegated_from']) or '-'}")
    click.echo(f"  Output template: {'yes' if summary['has_output_template'] else 'no'}")
    for key, value in summary["extra"].items():
        click.echo(f"  {key}: {value}")
    click.echo(f"  Source: {summary['source']}")
    click.echo()


@cli.command()
@click.option("--fail-on", type=click.Choice(["error", "warning", "info"]),
              help="Lowest severity that makes the command fail")
@click.pass_context
def lint(ctx: click.Context, fail_on: Optional[str]):
    """Check the corpus for broken front-matter, ids and delegations."""
    from agent_personas.lint import RULES_BY_CODE, Linter

    session = _session(ctx)
    report = Linter(session.config.lint).run(session.result, session.registry)

    for finding in report.findings:
        severity = click.style(finding.severity.upper(), fg=SEVERITY_COLORS[finding.severity])
        rule_name = RULES_BY_CODE[finding.code].name
        click.echo(f"{finding.location()}: {finding.code} {severity} {finding.message} [{rule_name}]")

    counts = report.counts()
    click.echo(
        f"\n{report.personas_checked} personas checked: "
        f"{counts['error']} errors, {counts['warning']} warnings, {counts['info']} info"
    )

    if report.failed(fail_on or session.config.lint.fail_on):
        ctx.exit(1)


@cli.command()
@click.pass_context
def rules(ctx: click.Context):
    """List lint rules with their effective severity."""
    from agent_personas.lint import RULES

    lint_config = ctx.obj["session"].config.lint
    click.echo(f"\nLint rules ({len(RULES)}):")
    for rule in RULES:
        severity = lint_config.severity_overrides.get(rule.code, rule.severity)
        if rule.code in lint_config.disabled_rules:
            severity = "off"
        color = SEVERITY_COLORS.get(severity, "white")
        click.echo(f"  {rule.code} {click.style(severity.upper(), fg=color)} {rule.name}: {rule.description}")
    click.echo()


@cli.command()
@click.argument("persona_id", required=False)
@click.pass_context
def delegations(ctx: click.Context, persona_id: Optional[str]):
    """Show delegation rules, for one persona or the whole corpus."""
    registry = _session(ctx).registry

    if persona_id is None:
        edges = registry.delegation_edges()
        if not edges:
            click.echo("No delegation rules found")
            return
        for source, rule in edges:
            marker = "" if rule.target in registry else click.style(" (unknown)", fg="red")
            click.echo(f"  {source} → {rule.target}{marker}: {rule.trigger}")
        return

    if persona_id not in registry:
        _fail(ctx, f"Persona not found: {persona_id}")
        return

    click.echo(f"\n{persona_id} delegates to:")
    for rule in registry.delegates_of(persona_id):
        click.echo(f"  → {rule.target}: {rule.trigger}")
    click.echo(f"\n{persona_id} receives from:")
    for source, rule in registry.delegators_to(persona_id):
        click.echo(f"  ← {source}: {rule.trigger}")
    click.echo()


@cli.command()
@click.argument("persona_id")
@click.pass_context
def template(ctx: click.Context, persona_id: str):
    """Print a persona's output template."""
    registry = _session(ctx).registry

    persona = registry.get(persona_id)
    if persona is None:
        _fail(ctx, f"Persona not found: {persona_id}")
        return
    if persona.output_template is None:
        _fail(ctx, f"{persona_id} has no output template")
        return

    click.echo(persona.output_template)


@cli.command()
@click.option("--format", "fmt", type=click.Choice(["json", "yaml"]), default="json",
              show_default=True)
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path),
              help="Write to file instead of stdout")
@click.pass_context
def export(ctx: click.Context, fmt: str, output: Optional[Path]):
    """Export the registry as JSON or YAML."""
    from agent_personas.export import export_registry

    text = export_registry(_session(ctx).registry, fmt)
    if output is None:
        click.echo(text, nl=False)
        return

    output.write_text(text, encoding="utf-8")
    click.echo(click.style(f"✅ Exported: {output}", fg="green"))


@cli.command()
@click.argument("out_dir", type=click.Path(file_okay=False, path_type=Path))
@click.option("--overwrite", is_flag=True, help="Replace existing files")
@click.pass_context
def split(ctx: click.Context, out_dir: Path, overwrite: bool):
    """Write every persona to its own file in OUT_DIR."""
    from agent_personas.errors import PersonaError
    from agent_personas.export import write_split

    session = _session(ctx)
    try:
        written = write_split(session.result.personas, out_dir, overwrite=overwrite)
    except PersonaError as e:
        _fail(ctx, str(e))
        return

    click.echo(click.style(f"✅ Wrote {len(written)} files to {out_dir}", fg="green"))


def main():
    """CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
