import sys

from ffbatch.presentation.cli import main

sys.exit(main())
