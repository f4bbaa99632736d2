"""
CLI for postlint.

Provides the command-line interface for linting a Jekyll post corpus,
listing rules, and inspecting posts.

Usage:
    postlint check
    postlint check _posts/2024-03-01-sqlite-in-tauri.md --format json
    postlint rules
    postlint stats --json
    postlint show _posts/2024-03-01-sqlite-in-tauri.md
    postlint duplicates
"""

import json
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from postlint import __version__
from postlint.config import LintConfig, SiteConfig
from postlint.corpus import Corpus
from postlint.errors import PostLintError
from postlint.linter import Linter
from postlint.logging import configure_logging, get_logger
from postlint.models import Post
from postlint.parser.markdown import classify_target
from postlint.renderers import RENDERERS, get_renderer
from postlint.report import Severity
from postlint.rules import RuleRegistry

console = Console()
err_console = Console(stderr=True)
logger = get_logger(__name__)

SEVERITY_STYLES = {"error": "red", "warning": "yellow", "info": "blue"}

site_root_option = click.option(
    "--site-root", "-s",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Root directory of the Jekyll site (default: current directory).",
)
config_option = click.option(
    "--config", "-c", "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="postlint YAML config (default: .postlint.yml in the site root).",
)


def _load_config(site_root: Path | None, config_path: Path | None, **overrides) -> LintConfig:
    """Build the effective config from file, discovery and CLI overrides."""
    if config_path is None:
        return LintConfig.discover(site_root or Path("."), **overrides)

    config = LintConfig.from_yaml(config_path)
    if site_root is not None:
        overrides["site_root"] = site_root
    if overrides:
        data = config.to_dict()
        data.update(overrides)
        config = LintConfig.from_dict(data)
    return config


def _locate_post(file_path: Path, site_root: Path | None) -> tuple[Path, bool]:
    """Site root and draft flag of a post, from its nearest _posts or _drafts ancestor."""
    path = file_path.resolve()
    for parent in path.parents:
        if parent.name in ("_posts", "_drafts"):
            return site_root or parent.parent, parent.name == "_drafts"
    return site_root or path.parent, False


def _fail(ctx: click.Context, error: PostLintError) -> None:
    err_console.print(f"[bold red]Error:[/bold red] {escape(error.message)}")
    logger.debug("command_failed", **error.to_dict())
    ctx.exit(2)


@click.group()
@click.version_option(version=__version__, prog_name="postlint")
@click.option("--verbose", "-v", is_flag=True, help="Log debug events to stderr.")
@click.option("--log-json", is_flag=True, help="Log as JSON lines.")
def cli(verbose: bool, log_json: bool):
    """Lint a Jekyll blog's posts.

    Checks front matter, code blocks and links across the whole _posts
    corpus, and finds duplicated draft revisions.
    """
    configure_logging(
        level="DEBUG" if verbose else "WARNING",
        json_format=True if log_json else None,
    )


@cli.command()
@click.argument(
    "paths",
    nargs=-1,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@site_root_option
@config_option
@click.option(
    "--format", "-f", "output_format",
    type=click.Choice(sorted(RENDERERS)),
    default="text",
    show_default=True,
    help="Report format.",
)
@click.option(
    "--output", "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the report to a file instead of stdout.",
)
@click.option(
    "--fail-on",
    type=click.Choice([s.value for s in Severity]),
    default=None,
    help="Lowest severity that makes the command fail (default from config: error).",
)
@click.option("--select", multiple=True, help="Only run these rules (code or name). Repeatable.")
@click.option("--ignore", multiple=True, help="Do not run these rules (code or name). Repeatable.")
@click.option("--include-drafts", is_flag=True, help="Lint _drafts as well.")
@click.option("--check-external", is_flag=True, help="Probe external URLs over the network.")
@click.pass_context
def check(
    ctx: click.Context,
    paths: tuple[Path, ...],
    site_root: Path | None,
    config_path: Path | None,
    output_format: str,
    output: Path | None,
    fail_on: str | None,
    select: tuple[str, ...],
    ignore: tuple[str, ...],
    include_drafts: bool,
    check_external: bool,
):
    """Lint posts and report problems.

    Lints every post of the site, or only PATHS when given (the whole
    corpus is still loaded to resolve links between posts).

    Exit status is 0 when clean, 1 when findings reach the --fail-on
    severity, and 2 on configuration or site errors.

    Examples:
        postlint check
        postlint check --format markdown --output report.md
        postlint check --select MD001 --select LNK001
        postlint check --ignore duplicate-title --fail-on warning
    """
    overrides = {}
    if include_drafts:
        overrides["include_drafts"] = True
    if check_external:
        overrides["check_external"] = True

    try:
        config = _load_config(site_root, config_path, **overrides)
        if ignore:
            config.disabled_rules = list(config.disabled_rules) + [
                RuleRegistry.get_or_raise(name).code for name in ignore
            ]

        rules = None
        if select:
            rules = [RuleRegistry.get_or_raise(name)() for name in select]

        report = Linter(config, rules=rules).lint(list(paths) or None)
        content = get_renderer(output_format).render(report)
    except PostLintError as e:
        _fail(ctx, e)
        return

    if output is not None:
        output.write_text(content, encoding="utf-8")
        err_console.print(f"Report written to {output}")
    else:
        click.echo(content, nl=False)

    ctx.exit(report.exit_code(fail_on or config.fail_on))


@cli.command()
def rules():
    """List all lint rules."""
    table = Table(title="Rules")
    table.add_column("Code", style="cyan", no_wrap=True)
    table.add_column("Name", no_wrap=True)
    table.add_column("Severity")
    table.add_column("Scope")
    table.add_column("Description")

    for rule in RuleRegistry.list_rules():
        severity = rule["severity"]
        scope = rule["scope"] + (" (network)" if rule["requires_network"] else "")
        table.add_row(
            rule["code"],
            rule["name"],
            f"[{SEVERITY_STYLES[severity]}]{severity}[/]",
            scope,
            escape(rule["description"]),
        )

    console.print(table)


@cli.command()
@site_root_option
@config_option
@click.option("--include-drafts", is_flag=True, help="Count _drafts as well.")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def stats(
    ctx: click.Context,
    site_root: Path | None,
    config_path: Path | None,
    include_drafts: bool,
    as_json: bool,
):
    """Show statistics about the post corpus.

    Displays post counts per year, layouts, code block styles, link kinds
    and duplicated draft revisions.
    """
    overrides = {"include_drafts": True} if include_drafts else {}
    try:
        corpus = Corpus.load(_load_config(site_root, config_path, **overrides))
    except PostLintError as e:
        _fail(ctx, e)
        return

    corpus_stats = corpus.stats()

    if as_json:
        click.echo(json.dumps(corpus_stats, indent=2))
        return

    console.print("\n[bold blue]📊 Corpus Statistics[/bold blue]\n")
    console.print(f"[bold]Posts:[/bold] {corpus_stats['posts']}")
    console.print(f"[bold]Drafts:[/bold] {corpus_stats['drafts']}")
    console.print(f"[bold]Unreadable:[/bold] {corpus_stats['unreadable']}")
    console.print(f"[bold]Words:[/bold] {corpus_stats['words']:,}")
    console.print(
        f"[bold]Duplicate titles:[/bold] {corpus_stats['duplicate_title_groups']} group(s), "
        f"{corpus_stats['posts_in_duplicate_groups']} post(s)"
    )
    console.print()

    for key, title in (
        ("posts_per_year", "Posts per Year"),
        ("layouts", "Layouts"),
        ("code_styles", "Code Styles"),
        ("code_blocks", "Code Blocks"),
        ("links", "Links"),
    ):
        values = corpus_stats[key]
        if not values:
            continue
        table = Table(title=title)
        table.add_column("Key", style="cyan")
        table.add_column("Count", justify="right")
        for name, count in values.items():
            table.add_row(escape(str(name)), str(count))
        console.print(table)


@cli.command()
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@site_root_option
@click.pass_context
def show(ctx: click.Context, file_path: Path, site_root: Path | None):
    """Show what postlint parsed from a single post.

    Useful for checking why a rule fires: prints the front matter, code
    blocks and links with their line numbers.
    """
    site_root, is_draft = _locate_post(file_path, site_root)
    try:
        post = Post.from_file(file_path, site_root, SiteConfig.load(site_root), is_draft=is_draft)
    except PostLintError as e:
        _fail(ctx, e)
        return

    console.print(f"\n[bold blue]📄 {escape(post.rel_path)}[/bold blue]\n")
    if post.filename is not None and post.filename.date is not None:
        console.print(f"  Date: {post.filename.date.isoformat()}  Slug: {escape(post.filename.slug)}")
    else:
        console.print("  [yellow]File name does not follow YYYY-MM-DD-title[/yellow]")

    if post.front_matter_error is not None:
        error = post.front_matter_error
        console.print(f"  [red]Front matter error ({error.kind}, line {error.line}):[/red] {escape(error.message)}")
    elif not post.has_front_matter:
        console.print("  [red]No front matter[/red]")
    else:
        console.print(f"  Front matter: lines {post.fm_line}-{post.body_line - 2}")
        for key, value in post.data.items():
            console.print(f"    {escape(str(key))}: {escape(repr(value))}")
        for key, value in post.defaults.items():
            if key not in post.data:
                console.print(f"    {escape(str(key))}: {escape(repr(value))} [dim](site default)[/dim]")

    if post.duplicate_front_matter_line is not None:
        console.print(f"  [yellow]Duplicate front matter at line {post.duplicate_front_matter_line}[/yellow]")
    console.print(f"  Body starts at line {post.body_line} ({post.word_count:,} words)")
    console.print()

    if post.document.code_blocks:
        table = Table(title="Code Blocks")
        table.add_column("Kind", style="cyan")
        table.add_column("Lines")
        table.add_column("Language")
        table.add_column("Closed", justify="center")
        for block in post.document.code_blocks:
            end = block.end_line if block.closed else "EOF"
            table.add_row(
                block.kind,
                f"{block.start_line}-{end}",
                escape(block.language or ""),
                "✅" if block.closed else "❌",
            )
        console.print(table)

    if post.document.links:
        table = Table(title="Links")
        table.add_column("Line", justify="right")
        table.add_column("Kind", style="cyan")
        table.add_column("Target")
        table.add_column("Class")
        for link in post.document.links:
            link_class = link.kind if link.is_liquid_tag else classify_target(link.target).kind
            table.add_row(str(link.line), link.kind, escape(link.target), link_class)
        console.print(table)

    if post.document.suppress_all:
        console.print("  All rules disabled inline")
    elif post.document.suppressed:
        console.print(f"  Disabled inline: {', '.join(sorted(post.document.suppressed))}")


@cli.command()
@site_root_option
@config_option
@click.option("--include-drafts", is_flag=True, help="Include _drafts in the comparison.")
@click.pass_context
def duplicates(
    ctx: click.Context,
    site_root: Path | None,
    config_path: Path | None,
    include_drafts: bool,
):
    """List posts that share a title (draft revisions).

    Titles are compared case-insensitively, ignoring punctuation.
    """
    overrides = {"include_drafts": True} if include_drafts else {}
    try:
        corpus = Corpus.load(_load_config(site_root, config_path, **overrides))
    except PostLintError as e:
        _fail(ctx, e)
        return

    groups = corpus.title_groups()
    if not groups:
        console.print("[bold green]✅ No duplicated titles[/bold green]")
        return

    console.print(f"\n[bold yellow]⚠️  {len(groups)} title(s) used by more than one post[/bold yellow]\n")
    for posts in groups.values():
        console.print(f"[bold]{escape(posts[0].title or '')}[/bold]")
        for post in posts:
            words = f"{post.word_count:,} words"
            draft = " [dim](draft)[/dim]" if post.is_draft else ""
            console.print(f"  {escape(post.rel_path)}  [dim]{words}[/dim]{draft}")
        console.print()


def main():
    """Entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
