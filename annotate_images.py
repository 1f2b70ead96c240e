#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Caption a directory of JPG images with their camera metadata.
"""

import image_noter.cli


if __name__ == "__main__":
	image_noter.cli.main()
