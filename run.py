#!/usr/bin/env python3
"""
Main entry point for the lidar data generator.
"""
import sys

from lidar_sim.simulation import main

if __name__ == "__main__":
    sys.exit(main())
