# type: ignore
import os
import tempfile

from invoke import task


@task
def venv(ctx):
    """Create .venv and install scenefixer with its test and dev extras."""
    ctx.run("uv venv")
    ctx.run('uv pip install -e ".[test,dev]"')


@task
def clean(ctx):
    """Remove build artifacts and tool caches."""
    for pattern in ("dist", "build", ".pytest_cache", ".mypy_cache", ".ruff_cache"):
        ctx.run(f"rm -rf {pattern}")
    ctx.run("find . -name __pycache__ -type d -prune -exec rm -rf {} +")


@task
def lint(ctx):
    """Check style, formatting and types."""
    ctx.run("ruff check src tests", pty=True)
    ctx.run("ruff format --check src tests", pty=True)
    ctx.run("mypy src", pty=True)


@task
def test(ctx):
    """Run the test suite with coverage."""
    ctx.run("pytest --cov=scenefixer --cov-report=term-missing", pty=True)


@task
def demo(ctx):
    """Check and audit the sample home in a throwaway directory."""
    from pathlib import Path

    from scenefixer.config import DatabaseConfig, HomeConfig, Settings, write_settings

    with tempfile.TemporaryDirectory() as tmp:
        root = Path(tmp)
        config_path = root / "config.toml"
        settings = Settings(
            database=DatabaseConfig(path=str(root)),
            home=HomeConfig(file=str(root / "home.yaml")),
        )
        write_settings(settings, config_path)

        env = {"SCENEFIXER_CONFIG": str(config_path)}
        for command in ("init", "check", "audit"):
            ctx.run(f"scenefixer {command}", env=env, pty=True)


@task
def build_package(ctx):
    """Build sdist and wheel."""
    ctx.run("rm -rf dist")
    ctx.run("uv build")


@task
def release(ctx):
    """Build and publish to PyPI."""
    token = os.getenv("PYPI_TOKEN")
    if not token:
        raise ValueError("PYPI_TOKEN environment variable is not set")

    ctx.run("invoke build-package")
    ctx.run(f"uv publish --token {token}")
