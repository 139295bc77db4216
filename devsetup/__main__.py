from devsetup.main import cli

cli(prog_name="devsetup")
