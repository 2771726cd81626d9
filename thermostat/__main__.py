import sys

from thermostat.workers.thermostat_cli import main

raise SystemExit(main(sys.argv[1:]))
