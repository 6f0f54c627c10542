import os
import sys

from .base import *

RUNNING_PYTEST = 'pytest' in sys.modules or any('pytest' in arg for arg in sys.argv)

if RUNNING_PYTEST:
    from .test import *
elif os.environ.get('env') == 'prod':
    from .prod_example import *
else:
    from .dev_sample import *
