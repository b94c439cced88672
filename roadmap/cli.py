import click
from flask.cli import with_appcontext
from sqlalchemy import func

from roadmap.errors import ValidationError
from roadmap.extensions import db
from roadmap.models.user import User, ROLE_ADMIN, ROLE_EMPLOYEE, ROLE_USER, ROLE_CHOICES
from roadmap.services.settings_store import SETTINGS_GROUPS, WidgetSettings


def _find_user(email: str):
    return db.session.execute(
        db.select(User).where(func.lower(User.email) == email.strip().lower())
    ).scalar_one_or_none()


@click.group()
def users():
    """User management."""

@users.command("create")
@click.option("--email", required=True)
@click.option("--password", required=True)
@click.option("--name", default=None, help="Display name (defaults to the email's local part)")
@click.option("--role", type=click.Choice(ROLE_CHOICES), default=ROLE_USER)
@with_appcontext
def users_create(email, password, name, role):
    if _find_user(email):
        raise click.ClickException("User already exists")

    email = email.strip().lower()
    user = User(email=email, name=name or email.split("@", 1)[0], role=role, is_active=True)
    user.set_password(password)
    db.session.add(user)
    db.session.commit()

    click.echo(f"User created id={user.id} email={user.email} role={role}")

@users.command("promote")
@click.option("--email", required=True)
@click.option("--role", type=click.Choice([ROLE_ADMIN, ROLE_EMPLOYEE]), required=True)
@with_appcontext
def users_promote(email, role):
    user = _find_user(email)
    if not user:
        raise click.ClickException("User not found")
    user.role = role
    db.session.commit()
    click.echo(f"Promoted {user.email} to {role}")

@users.command("demote")
@click.option("--email", required=True)
@with_appcontext
def users_demote(email):
    user = _find_user(email)
    if not user:
        raise click.ClickException("User not found")

    # Safety rail: cannot demote the last admin
    admins = db.session.query(User).filter_by(role=ROLE_ADMIN).count()
    if user.role == ROLE_ADMIN and admins <= 1:
        raise click.ClickException("Refused: cannot demote the last admin")

    user.role = ROLE_USER
    db.session.commit()
    click.echo(f"Demoted {user.email} to {ROLE_USER}")


@click.group()
def settings():
    """Settings groups."""

@settings.command("init")
@with_appcontext
def settings_init():
    """Create any missing settings rows with their defaults."""
    for name, cls in SETTINGS_GROUPS.items():
        if cls.version():
            click.echo(f"{name}: exists")
            continue
        cls().save()
        click.echo(f"{name}: created")


@click.group()
def widget():
    """Feedback widget switches."""

@widget.command("show")
@with_appcontext
def widget_show():
    s = WidgetSettings.load()
    click.echo(f"enabled={s.enabled} position={s.position} primary_color={s.primary_color} "
               f"button_text={s.button_text!r}")
    click.echo("allowed_domains=" + (", ".join(s.allowed_domains) or "(any)"))

@widget.command("enable")
@with_appcontext
def widget_enable():
    s = WidgetSettings.load()
    s.enabled = True
    s.save()
    click.echo("Widget enabled")

@widget.command("disable")
@with_appcontext
def widget_disable():
    s = WidgetSettings.load()
    s.enabled = False
    s.save()
    click.echo("Widget disabled")

@widget.command("domains")
@click.argument("domains", nargs=-1)
@click.option("--clear", is_flag=True, help="Allow every website again")
@with_appcontext
def widget_domains(domains, clear):
    """Replace the allowed domains list."""
    if not domains and not clear:
        raise click.UsageError("Pass one or more domains, or --clear")
    try:
        s = WidgetSettings.load().merged({"allowed_domains": [] if clear else list(domains)})
    except ValidationError as exc:
        raise click.ClickException(str(exc.errors))
    s.save()
    click.echo("allowed_domains=" + (", ".join(s.allowed_domains) or "(any)"))


def register_cli(app):
    app.cli.add_command(users)
    app.cli.add_command(settings)
    app.cli.add_command(widget)
