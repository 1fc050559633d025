"""MonQuest CMS CLI tool (monquestctl)."""

import asyncio
import json
import logging

import typer

app = typer.Typer(name="monquestctl", help="MonQuest CMS CLI")
db_app = typer.Typer(help="Database management commands")
roles_app = typer.Typer(help="Role inspection commands")
session_app = typer.Typer(help="Cached admin session commands")
content_app = typer.Typer(help="Landing page content maintenance")
app.add_typer(db_app, name="db")
app.add_typer(roles_app, name="roles")
app.add_typer(session_app, name="session")
app.add_typer(content_app, name="content")


@db_app.command("create")
def db_create():
    """Create the MySQL database if it doesn't exist."""
    import pymysql
    from sqlalchemy.engine import make_url
    from monquest_cms.core.config import settings

    url = make_url(settings.DATABASE_URL)
    if not url.drivername.startswith("mysql"):
        typer.echo(f"ℹ️  {url.drivername} databases need no explicit creation")
        return

    conn = pymysql.connect(
        host=url.host or "localhost", port=url.port or 3306,
        user=url.username, password=url.password or "",
    )
    try:
        cursor = conn.cursor()
        cursor.execute(
            f"CREATE DATABASE IF NOT EXISTS `{url.database}` "
            "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
        typer.echo(f"✅ Database '{url.database}' created (or already exists)")
    finally:
        conn.close()


@db_app.command("init")
def db_init():
    """Create all tables."""
    import monquest_cms.models  # noqa: F401  registers models on Base
    from monquest_cms.db.base import Base
    from monquest_cms.db.session import engine

    Base.metadata.create_all(bind=engine)
    typer.echo("✅ Tables created")


@db_app.command("seed")
def db_seed():
    """Seed roles, super-admin, and landing page content."""
    from monquest_cms.db.session import SessionLocal
    from monquest_cms.db.seeds.seed_roles import seed_roles
    from monquest_cms.db.seeds.seed_super_admin import seed_super_admin
    from monquest_cms.db.seeds.seed_sample_data import seed_sample_data

    db = SessionLocal()
    try:
        seed_roles(db)
        seed_super_admin(db)
        seed_sample_data(db)
    finally:
        db.close()
    typer.echo("✅ All seeds applied")


@db_app.command("reset")
def db_reset():
    """Drop and recreate all tables (DANGER)."""
    confirm = typer.confirm("⚠️  This will DROP every table. Continue?")
    if not confirm:
        raise typer.Abort()
    import monquest_cms.models  # noqa: F401
    from monquest_cms.db.base import Base
    from monquest_cms.db.session import engine

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    typer.echo("✅ Database reset")


@roles_app.command("list")
def roles_list():
    """List roles with their user counts and permission counts."""
    from monquest_cms.db.session import SessionLocal
    from monquest_cms.services.role_service import role_service

    db = SessionLocal()
    try:
        counts = role_service.user_counts(db)
        result = role_service.list_roles(db, page=1, limit=1000)
        for role in result["roles"]:
            marker = " [system]" if role.is_system else ""
            typer.echo(
                f"  {role.slug:<16} {role.name}{marker} "
                f"users={counts.get(role.id, 0)} permissions={len(role.permissions or [])}"
            )
    finally:
        db.close()


@content_app.command("fix-colors")
def content_fix_colors(
    color: str = typer.Option("primary", help="Color given to items without one"),
):
    """Give every colorless section item a default color."""
    from monquest_cms.db.session import SessionLocal
    from monquest_cms.services.content_service import content_service

    db = SessionLocal()
    try:
        changed = content_service.apply_default_colors(db, color)
    finally:
        db.close()
    if not changed:
        typer.echo("ℹ️  All items already have a color")
        return
    for section, count in changed.items():
        typer.echo(f"✅ {section}: {count} item(s) set to {color}")


def _store(path):
    from monquest_cms.client.session_store import SessionStore
    return SessionStore(path)


@session_app.command("show")
def session_show(path: str = typer.Option(None, help="Session cache file")):
    """Print the cached admin session."""
    session = _store(path).load()
    if session is None:
        typer.echo("ℹ️  No cached session")
        raise typer.Exit(code=1)
    typer.echo(json.dumps(session.model_dump(by_alias=True), indent=2))


@session_app.command("clear")
def session_clear(path: str = typer.Option(None, help="Session cache file")):
    """Remove the cached admin session."""
    _store(path).clear()
    typer.echo("✅ Session cache cleared")


@session_app.command("login")
def session_login(
    email: str = typer.Option(..., prompt=True),
    password: str = typer.Option(..., prompt=True, hide_input=True),
    path: str = typer.Option(None, help="Session cache file"),
):
    """Sign in and cache the admin session."""
    from monquest_cms.client.auth import AuthContext
    from monquest_cms.client.http import AdminApiClient
    from monquest_cms.core.config import settings

    async def _login():
        auth = AuthContext(_store(path))
        api = AdminApiClient(settings.API_BASE_URL, lambda: auth.session, bus=auth.bus)
        auth.api = api
        try:
            return await auth.login(email, password)
        finally:
            await api.aclose()

    result = asyncio.run(_login())
    if not result.success:
        typer.echo(f"❌ {result.error}")
        raise typer.Exit(code=1)
    typer.echo("✅ Signed in")


@session_app.command("watch")
def session_watch(
    path: str = typer.Option(None, help="Session cache file"),
    interval: float = typer.Option(None, help="Seconds between syncs"),
):
    """Keep the cached session in sync with the server until interrupted."""
    from monquest_cms.client.auth import AuthContext
    from monquest_cms.client.events import NOTIFICATION_CREATED, PERMISSIONS_UPDATED
    from monquest_cms.client.http import AdminApiClient
    from monquest_cms.client.notifications import UnreadCounter
    from monquest_cms.client.sync import AuthSynchronizer
    from monquest_cms.core.config import settings

    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    async def _watch():
        auth = AuthContext(_store(path))
        api = AdminApiClient(settings.API_BASE_URL, lambda: auth.session, bus=auth.bus)
        auth.api = api
        if auth.initialize() is None:
            typer.echo("ℹ️  No cached session, run `monquestctl session login` first")
            return
        counter = UnreadCounter(api, auth.bus)
        counter.mount()
        auth.bus.subscribe(PERMISSIONS_UPDATED, lambda: typer.echo(
            f"🔄 Role {auth.session.role.slug}: {', '.join(sorted(auth.session.role.permissions))}"
        ))
        auth.bus.subscribe(NOTIFICATION_CREATED, lambda: typer.echo("🔔 New notification"))
        sync = AuthSynchronizer(auth, api, interval=interval, on_toast=lambda msg: typer.echo(f"💬 {msg}"))
        try:
            await counter.refresh()
            typer.echo(f"👤 {auth.session.email} ({auth.session.role.slug}), {counter.count} unread")
            async with sync.protected_area():
                while auth.is_authenticated:
                    await asyncio.sleep(1)
            typer.echo("🚪 Session ended")
        finally:
            counter.unmount()
            await api.aclose()

    try:
        asyncio.run(_watch())
    except KeyboardInterrupt:
        pass


@app.command("serve")
def serve(
    host: str = typer.Option("0.0.0.0", help="Host"),
    port: int = typer.Option(8000, help="Port"),
    reload: bool = typer.Option(False, help="Auto-reload"),
):
    """Start the FastAPI server."""
    import uvicorn
    uvicorn.run("monquest_cms.main:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
