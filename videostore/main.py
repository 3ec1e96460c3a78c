"""
Point d'entrée CLI de VideoStore.

Initialise le container DI, configure le logging et fournit les commandes CLI.
"""

from typing import Annotated, Optional

import typer
from loguru import logger

from . import __version__
from .config import Settings
from .container import Container
from .core.errors import StructuralViolation
from .logging_config import configure_from_settings
from .services.listing import offset_for_page

app = typer.Typer(
    name="videostore",
    help="Catalogue de films, d'acteurs et d'images",
)
container = Container()


def get_config() -> Settings:
    """Récupère les paramètres de l'application depuis le container DI."""
    return container.config()


def _page_options(page: int, rows: Optional[int]) -> tuple[int, int]:
    limit = rows if rows is not None else get_config().default_page_limit
    try:
        return offset_for_page(page, limit), limit
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _report(exc: StructuralViolation) -> None:
    for path, message in exc.as_dict().items():
        typer.echo(f"{path}: {message}", err=True)
    raise typer.Exit(code=2)


@app.command()
def info() -> None:
    """Affiche la configuration actuelle."""
    config = get_config()
    logger.info("Configuration VideoStore")
    typer.echo(f"Base de données : {config.database_url}")
    typer.echo(f"Taille de page par défaut : {config.default_page_limit}")
    typer.echo(f"API : http://{config.api_host}:{config.api_port}/registration")
    typer.echo(f"Niveau de log : {config.log_level}")
    typer.echo(f"Fichier de log : {config.log_file}")


@app.command()
def version() -> None:
    """Affiche les informations de version."""
    typer.echo(f"VideoStore v{__version__}")


@app.command(name="init-db")
def init_db() -> None:
    """Crée les tables du catalogue si nécessaire."""
    container.database.init()
    typer.echo(f"Base initialisée : {get_config().database_url}")


@app.command()
def movies(
    search: Annotated[Optional[str], typer.Option("--search", "-s", help="Filtre sur le titre")] = None,
    page: Annotated[int, typer.Option("--page", "-p", help="Numéro de page")] = 1,
    rows: Annotated[Optional[int], typer.Option("--rows", "-n", help="Films par page")] = None,
) -> None:
    """Liste les films par titre."""
    offset, limit = _page_options(page, rows)
    container.database.init()
    session = container.session()
    try:
        result = container.listing_service(session=session).list_movies(offset, limit, search)
    except StructuralViolation as exc:
        _report(exc)
    finally:
        session.close()

    for movie in result.items:
        typer.echo(f"{movie.imdb_id}  {movie.title} ({movie.year})")
    typer.echo(f"Page {result.page_number}/{max(result.total_pages, 1)} - {result.total} film(s)")


@app.command()
def actors(
    search: Annotated[Optional[str], typer.Option("--search", "-s", help="Filtre sur le nom")] = None,
    page: Annotated[int, typer.Option("--page", "-p", help="Numéro de page")] = 1,
    rows: Annotated[Optional[int], typer.Option("--rows", "-n", help="Acteurs par page")] = None,
) -> None:
    """Liste les acteurs par nom puis prénom."""
    offset, limit = _page_options(page, rows)
    container.database.init()
    session = container.session()
    try:
        result = container.listing_service(session=session).list_actors(offset, limit, search)
    except StructuralViolation as exc:
        _report(exc)
    finally:
        session.close()

    for actor in result.items:
        born = actor.birth_date.isoformat() if actor.birth_date else "?"
        typer.echo(f"{actor.id:>5}  {actor.full_name} ({born})")
    typer.echo(f"Page {result.page_number}/{max(result.total_pages, 1)} - {result.total} acteur(s)")


@app.command()
def serve(
    host: Annotated[Optional[str], typer.Option(help="Adresse d'écoute")] = None,
    port: Annotated[Optional[int], typer.Option(help="Port d'écoute")] = None,
    reload: Annotated[bool, typer.Option(help="Rechargement automatique")] = False,
) -> None:
    """Lance l'API REST VideoStore."""
    import uvicorn

    config = get_config()
    host = host or config.api_host
    port = port or config.api_port
    typer.echo(f"Démarrage du serveur sur {host}:{port}")
    uvicorn.run("videostore.web.app:app", host=host, port=port, reload=reload)


def main() -> None:
    """Point d'entrée de l'application."""
    # Charge la configuration et configure le logging
    configure_from_settings(get_config())
    logger.info("Démarrage de VideoStore", version=__version__)

    # Lance la CLI
    app()


if __name__ == "__main__":
    main()
