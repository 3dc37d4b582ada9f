"""
cli.py
Text front-end. Every command loads the member CSV, works on it, and saves
it back when something changed.

Run: gym-members --help   (or: python cli.py --help)
"""

from __future__ import annotations

import logging
from pathlib import Path

import click

import utils
from models import MAX_PERFORMANCE_RATING, MIN_PERFORMANCE_RATING, TYPE_PREMIUM, TYPE_STUDENT
from search import MemberSearcher, SearchField
from sorting import SORT_FIELDS, MemberSorter, SortAlgorithm, SortOrder
from store import DuplicateMemberError, MemberStore

logger = logging.getLogger(__name__)

MEMBER_TYPE_CHOICES = {"regular": "Regular", "premium": TYPE_PREMIUM, "student": TYPE_STUDENT}


def _load_store(ctx: click.Context) -> MemberStore:
    store: MemberStore = ctx.obj
    if store.data_file.exists():
        store.load_from_file()
    else:
        logger.info("%s not found, starting with no members", store.data_file)
    return store


def _echo_members(members) -> None:
    if not members:
        click.echo("No members found.")
        return
    for m in members:
        click.echo(str(m))
    click.echo(f"({len(members)} member(s))")


@click.group()
@click.option(
    "--file", "data_file", default=None, type=click.Path(dir_okay=False, path_type=Path),
    help="Member CSV file (default: GYM_MEMBERS_FILE or member_data.csv)",
)
@click.pass_context
def cli(ctx: click.Context, data_file: Path | None):
    """Gym member administration."""
    ctx.obj = MemberStore(data_file)


@cli.command()
@click.pass_context
def seed(ctx: click.Context):
    """Add the sample members (existing IDs are left alone)."""
    store = _load_store(ctx)
    added = utils.insert_sample_data(store)
    store.save_to_file()
    click.echo(f"Added {added} sample member(s) to {store.data_file}")


@cli.command("list")
@click.option("--by", "sort_by", default=None, type=click.Choice(SORT_FIELDS), help="Sort field")
@click.option("--order", default=SortOrder.ASCENDING.value, type=click.Choice([o.value for o in SortOrder]), show_default=True)
@click.pass_context
def list_members(ctx: click.Context, sort_by: str | None, order: str):
    """List all members."""
    members = _load_store(ctx).get_all_members()
    if sort_by:
        members = MemberSorter().sort(members, sort_by, order)
    _echo_members(members)


@cli.command()
@click.argument("member_id")
@click.pass_context
def show(ctx: click.Context, member_id: str):
    """Show the performance report of one member."""
    member = _load_store(ctx).find_by_id(member_id)
    if member is None:
        raise click.ClickException(f"Member not found: {member_id}")
    click.echo(str(member))
    click.echo(member.generate_performance_report())


@cli.command()
@click.option("--type", "member_type", required=True, type=click.Choice(list(MEMBER_TYPE_CHOICES), case_sensitive=False))
@click.option("--id", "member_id", required=True)
@click.option("--first", "first_name", required=True)
@click.option("--last", "last_name", required=True)
@click.option("--email", default="")
@click.option("--phone", default="")
@click.option("--rating", default=5, type=int, show_default=True)
@click.option("--goal/--no-goal", default=False, show_default=True)
@click.option("--trainer", default="", help="[premium] Trainer name")
@click.option("--sessions", default=None, type=int, help="[premium] Sessions per month")
@click.option("--student-id", default="", help="[student] Student ID")
@click.option("--university", default="", help="[student] University")
@click.pass_context
def add(ctx, member_type, member_id, first_name, last_name, email, phone, rating, goal,
        trainer, sessions, student_id, university):
    """Add a new member."""
    store = _load_store(ctx)
    type_tag = MEMBER_TYPE_CHOICES[member_type.lower()]

    errors = utils.validate_member_inputs(
        type_tag, member_id, first_name, last_name, email,
        performance_rating=rating, sessions_per_month=sessions, store=store,
    )
    if errors:
        raise click.ClickException(" ".join(errors))

    if type_tag == TYPE_PREMIUM:
        extra1, extra2 = trainer, "" if sessions is None else str(sessions)
    elif type_tag == TYPE_STUDENT:
        extra1, extra2 = student_id, university
    else:
        extra1, extra2 = "", ""

    member = utils.build_member(type_tag, member_id, first_name, last_name, email, phone, rating, goal, extra1, extra2)
    try:
        store.add_member(member)
    except DuplicateMemberError as e:
        raise click.ClickException(str(e))
    store.save_to_file()
    click.echo(f"Added: {member}")
    click.echo(utils.describe_fee_rules(type_tag))


@cli.command()
@click.argument("member_id")
@click.option("--email", default=None)
@click.option("--phone", default=None)
@click.option("--rating", default=None, type=int)
@click.option("--goal/--no-goal", default=None)
@click.pass_context
def update(ctx, member_id, email, phone, rating, goal):
    """Update contact details, rating or goal status."""
    updates = {}
    if email is not None:
        updates["email"] = email
    if phone is not None:
        updates["phone"] = phone
    if rating is not None:
        updates["performance_rating"] = rating
    if goal is not None:
        updates["goal_achieved"] = goal
    if not updates:
        raise click.UsageError("Nothing to update.")

    store = _load_store(ctx)
    if not store.update_member(member_id, updates):
        raise click.ClickException(f"Member not found: {member_id}")
    if rating is not None and not MIN_PERFORMANCE_RATING <= rating <= MAX_PERFORMANCE_RATING:
        click.echo(
            f"Rating {rating} is out of range ({MIN_PERFORMANCE_RATING}-{MAX_PERFORMANCE_RATING}); rating unchanged."
        )
    store.save_to_file()
    click.echo(f"Updated: {store.find_by_id(member_id)}")


@cli.command()
@click.argument("member_id")
@click.confirmation_option(prompt="Confirm deletion?")
@click.pass_context
def delete(ctx, member_id):
    """Delete a member."""
    store = _load_store(ctx)
    if not store.remove_member(member_id):
        raise click.ClickException(f"Member not found: {member_id}")
    store.save_to_file()
    click.echo(f"Deleted: {member_id}")


@cli.command()
@click.argument("text", default="")
@click.option("--field", default=SearchField.ALL_FIELDS.value, type=click.Choice([f.value for f in SearchField]), show_default=True)
@click.pass_context
def search(ctx, text, field):
    """Free-text search within one field (blank text lists everyone)."""
    searcher = MemberSearcher(_load_store(ctx))
    _echo_members(searcher.search(text, field))


@cli.command("advanced-search")
@click.argument("criteria", nargs=-1, required=True)
@click.pass_context
def advanced_search(ctx, criteria):
    """Members matching every KEY=VALUE criterion (id, name, email, type, goal)."""
    parsed = {}
    for item in criteria:
        key, sep, value = item.partition("=")
        if not sep:
            raise click.BadParameter(f"expected KEY=VALUE, got {item!r}", param_hint="CRITERIA")
        parsed[key.strip()] = value.strip()
    searcher = MemberSearcher(_load_store(ctx))
    _echo_members(searcher.advanced_search(parsed))


@cli.command("sort")
@click.option("--by", "sort_by", default="Name", type=click.Choice(SORT_FIELDS), show_default=True)
@click.option("--order", default=SortOrder.ASCENDING.value, type=click.Choice([o.value for o in SortOrder]), show_default=True)
@click.option(
    "--algorithm", default="auto", show_default=True,
    type=click.Choice(["auto"] + [a.value for a in SortAlgorithm]),
)
@click.pass_context
def sort_members(ctx, sort_by, order, algorithm):
    """Sort members with a chosen algorithm."""
    sorter = MemberSorter()
    members = sorter.sort(
        _load_store(ctx).get_all_members(), sort_by, order,
        None if algorithm == "auto" else algorithm,
    )
    _echo_members(members)
    stats = sorter.get_sort_statistics()
    click.echo(f"{stats['last_algorithm_used']}: {stats['last_sort_time_ms']:.3f} ms")


@cli.command()
@click.pass_context
def stats(ctx):
    """Counts by type, average rating and goal achievers."""
    s = _load_store(ctx).statistics()
    if s["total"] == 0:
        click.echo("No members in the system.")
        return
    click.echo("===== Gym Statistics =====")
    click.echo(f"Total Members: {s['total']}")
    click.echo(f"Regular Members: {s['regular']}")
    click.echo(f"Premium Members: {s['premium']}")
    click.echo(f"Student Members: {s['student']}")
    click.echo(f"Average Performance Rating: {s['average_performance']:.2f}")
    click.echo(f"Members Who Achieved Goals: {s['goal_achievers']}")


@cli.command()
@click.argument("kind", type=click.Choice(["appreciation", "reminder"]))
@click.pass_context
def letters(ctx, kind):
    """Appreciation (rating >= 8) or reminder (rating < 5) letters."""
    store = _load_store(ctx)
    texts = utils.appreciation_letters(store) if kind == "appreciation" else utils.reminder_letters(store)
    if not texts:
        click.echo(f"No {kind} letters to generate.")
        return
    click.echo("\n------------------------\n".join(texts))


@cli.command()
@click.pass_context
def fees(ctx):
    """Monthly fee of every member."""
    members = _load_store(ctx).get_all_members()
    if not members:
        click.echo("No members in the system.")
        return
    df = utils.members_to_dataframe(members)[["member_id", "full_name", "type", "monthly_fee"]]
    click.echo(df.to_string(index=False))


@cli.command()
@click.option("--by", "sort_by", default="Name", type=click.Choice(SORT_FIELDS), show_default=True)
@click.pass_context
def benchmark(ctx, sort_by):
    """Time every sort algorithm on the current members."""
    results = MemberSorter().benchmark(_load_store(ctx).get_all_members(), sort_by)
    for name, elapsed in sorted(results.items(), key=lambda kv: kv[1]):
        click.echo(f"{name:<15} {elapsed:>12} ns")


def main():
    utils.setup_logger()
    cli()


if __name__ == "__main__":
    main()
