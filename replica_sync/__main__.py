from replica_sync.main import cli

cli()
