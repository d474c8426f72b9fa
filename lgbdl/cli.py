# lgbdl/cli.py

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Annotated, Any, Optional

import typer

from .config import InstallOptions

cli = typer.Typer(
    add_completion=False,
    help="Instalador de LightGBM para R. Usa ‘lgbdl <comando> --help’ para detalles.",
    no_args_is_help=True,
)

# ───────────────── Opciones ─────────────────

# --- Origen ---
CommitOpt = Annotated[Optional[str], typer.Option("--commit", "-c", help="Commit / rama a usar. \"\" = sin checkout.", rich_help_panel="Origen")]
RepoOpt = Annotated[Optional[str], typer.Option("--repo", "-r", help="URL del repositorio (fork propio, p.ej.).", rich_help_panel="Origen")]
LibdllOpt = Annotated[Optional[str], typer.Option("--libdll", "-l", help="Ruta o URL de una librería precompilada (lib_lightgbm).", rich_help_panel="Origen")]

# --- Compilación ---
CompilerOpt = Annotated[Optional[str], typer.Option("--compiler", help="Sólo Windows: 'gcc' (MinGW) o 'vs' (Visual Studio).", rich_help_panel="Opciones de Build")]
GpuOpt = Annotated[Optional[bool], typer.Option("--gpu/--no-gpu", help="Compilar con soporte GPU.", rich_help_panel="Opciones de Build")]
CoresOpt = Annotated[Optional[int], typer.Option("--cores", "-j", min=1, help="Hilos de compilación (se ignora con Visual Studio).", rich_help_panel="Opciones de Build")]
R35Opt = Annotated[Optional[bool], typer.Option("--r35/--no-r35", help="Forzar USE_R35. Por defecto se detecta según la versión de R.", rich_help_panel="Opciones de Build")]

# --- Entorno ---
WorkdirOpt = Annotated[Optional[Path], typer.Option("--workdir", "-w", file_okay=False, help="Directorio de trabajo. Por defecto uno temporal nuevo.", rich_help_panel="Entorno")]
KeepOpt = Annotated[bool, typer.Option("--keep-workdir", help="No borrar el directorio de trabajo al terminar.", rich_help_panel="Entorno")]


def _options(**kwargs: Any) -> InstallOptions:
    """Construye `InstallOptions` sólo con lo que se pasó por CLI (el resto: env/defaults)."""
    overrides = {k: v for k, v in kwargs.items() if v is not None}
    if "workdir" in overrides:
        overrides["workdir"] = str(overrides["workdir"])
    try:
        return InstallOptions(**overrides)
    except ValueError as e:
        typer.secho(f"❌  {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(2)


# ─────────────── Comandos ───────────────

@cli.command()
def install(
    commit: CommitOpt = None,
    repo: RepoOpt = None,
    libdll: LibdllOpt = None,
    compiler: CompilerOpt = None,
    gpu: GpuOpt = None,
    cores: CoresOpt = None,
    r35: R35Opt = None,
    workdir: WorkdirOpt = None,
    keep_workdir: KeepOpt = False,
) -> None:
    """Clona, compila e instala el paquete R de LightGBM."""
    from .installer import CommandError, InstallError
    from .installer import install as run_install

    opts = _options(
        commit=commit, repo=repo, libdll=libdll, compiler=compiler, use_gpu=gpu,
        cores=cores, r35=r35, workdir=workdir, keep_workdir=keep_workdir,
    )
    typer.echo(f"🚀  Instalando LightGBM desde {opts.repo} ({opts.commit or 'HEAD'})")

    try:
        result = run_install(opts)
    except CommandError as e:
        typer.secho(f"❌  {e}", fg=typer.colors.RED, err=True)
        # código negativo = proceso matado por señal
        raise typer.Exit(e.returncode if e.returncode > 0 else 1)
    except (InstallError, RuntimeError, FileNotFoundError) as e:
        typer.secho(f"❌  {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)

    if not result:
        typer.secho(f"🙁  {opts.package} no quedó instalado.", fg=typer.colors.YELLOW)
        raise typer.Exit(1)
    if result.fresh:
        typer.secho(f"✅  {opts.package} instalado correctamente.", fg=typer.colors.GREEN)
    else:
        typer.secho(f"✅  {opts.package} reinstalado (ya estaba presente).", fg=typer.colors.GREEN)


@cli.command()
def script(
    commit: CommitOpt = None,
    repo: RepoOpt = None,
    libdll: LibdllOpt = None,
    compiler: CompilerOpt = None,
    gpu: GpuOpt = None,
    cores: CoresOpt = None,
    r35: R35Opt = None,
    workdir: WorkdirOpt = None,
) -> None:
    """Muestra el script de compilación sin ejecutar nada."""
    from .installer.script import build_plan, render_script

    opts = _options(
        commit=commit, repo=repo, libdll=libdll, compiler=compiler, use_gpu=gpu,
        cores=cores, r35=r35, workdir=workdir,
    )
    target = opts.workdir or str(Path(tempfile.gettempdir()) / "lgbdl-XXXXXXXX")
    typer.echo(render_script(build_plan(opts, target), opts.windows), nl=False)


def _main() -> None:
    cli()

if __name__ == "__main__":
    _main()
