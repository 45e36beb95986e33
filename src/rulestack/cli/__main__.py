import sys

from rulestack.cli._dispatcher import main

sys.exit(main())
