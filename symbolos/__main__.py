from symbolos.cli import app

app(prog_name="symbolos")
