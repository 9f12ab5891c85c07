import sys

from tinytracer.main import main

sys.exit(main())
