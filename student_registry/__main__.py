import sys

from student_registry.main import main

sys.exit(main())
