from invoke import task


@task
def lint(c):
    c.run("ruff check .")


@task
def format_check(c):
    c.run("ruff format --check .")


@task
def test(c):
    c.run("pytest")


@task
def demo(c, config="club.yaml"):
    """Seed a small ladder season in the configured database."""
    cli = f"club-ladder {{}} -c {config}"
    for uid, name in [("anna", "Anna"), ("bertil", "Bertil"), ("cecilia", "Cecilia")]:
        c.run(cli.format(f"add-user {uid} {uid}@example.com --name {name}"))
    c.run(cli.format('create-ladder "Stegen"'))
    for uid in ["anna", "bertil", "cecilia"]:
        c.run(cli.format(f"join {uid}"))
    c.run(cli.format("standings --as cecilia"))


@task
def ci(c):
    lint(c)
    format_check(c)
    test(c)
