#!/usr/bin/env python3
from aioetcd2.tools.main import main

if __name__ == '__main__':
    main()
