from invoke import task


@task
def env(c):
    """
    Create/update the project virtual environment and install dependencies.
    """
    c.run("uv pip install -e .[dev]")


@task(pre=[env], help={"path": "test file or directory to run"})
def test(c, path="tests"):
    """
    Run the test suite.
    """
    c.run(f"uv run pytest {path} -v", pty=True)


@task(pre=[env])
def lint(c):
    """
    Check formatting and types.
    """
    c.run("uv run black --check club_nlq tests")
    c.run("uv run isort --check-only club_nlq tests")
    c.run("uv run mypy club_nlq")
