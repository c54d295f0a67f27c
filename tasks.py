from invoke import task
from pathlib import Path

# Get project root directory
PROJECT_ROOT = Path(__file__).parent.absolute()


def project_relative(path):
    """Convert a relative path to an absolute path relative to the project root."""
    return str(PROJECT_ROOT / path)


@task
def update(c):
    """Update all dependencies to their latest versions using poetry."""
    c.run("poetry update")


@task
def up(c):
    """Alias for update - update all dependencies to their latest versions."""
    update(c)


@task
def test(c, path=None):
    """Run Django tests. Optionally specify a specific test path."""
    manage_py = project_relative("manage.py")
    with c.prefix("export DJANGO_SETTINGS_MODULE=pongbracket.test_settings"):
        if path:
            c.run(f"python {manage_py} test {path}")
        else:
            c.run(f"python {manage_py} test")


@task
def simulate(c, size=8, guests=0, seed=None):
    """Play a random tournament and print the bracket."""
    manage_py = project_relative("manage.py")
    command = f"python {manage_py} simulate_tournament --size {size} --guests {guests}"
    if seed is not None:
        command += f" --seed {seed}"
    c.run(command)


@task
def shell(c):
    """Start Django shell."""
    manage_py = project_relative("manage.py")
    c.run(f"python {manage_py} shell")
