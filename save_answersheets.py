#!/usr/bin/env python3
"""
Quiz Answer Sheets Downloader

Processes an instruction script exported by the quiz answer sheets report:
downloads the attachments, renders each attempt's review page to PDF, and
zips everything as output/<zip-name>.zip.

Requirements:
  pip install requests playwright
  python -m playwright install chromium

Usage:
    python save_answersheets.py instructions.txt                 # Everything
    python save_answersheets.py -a alice instructions.txt        # One attempt's responses.pdf
    python save_answersheets.py -r 5KB instructions.txt          # Redo small responses.pdf
    python save_answersheets.py --skip-pdfs instructions.txt     # Attachments only
"""

import sys

from answersheets.core import main

if __name__ == "__main__":
    sys.exit(main())
