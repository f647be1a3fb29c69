from roster.main import run

run()
