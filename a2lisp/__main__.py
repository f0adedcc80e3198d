import sys

from a2lisp.repl import main

sys.exit(main())
