#!/usr/bin/env python3
"""
BASE ASSAULT Launcher
======================
Run this script to start the game.
"""

from base_assault.main import main

if __name__ == "__main__":
    main()
