from payprep.cli import run

run()
