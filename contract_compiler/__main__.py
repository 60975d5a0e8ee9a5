import sys

from contract_compiler.cli import main

sys.exit(main())
