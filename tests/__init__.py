# Copyright Red Hat
#
# tests/__init__.py - Directory tree differ test package
#
# This file is part of the treediff project.
#
# SPDX-License-Identifier: Apache-2.0
import logging

log = logging.getLogger()
log.setLevel(logging.DEBUG)
formatter = logging.Formatter('%(asctime)s %(levelname)s %(name)s %(message)s')
file_handler = logging.FileHandler("test.log")
file_handler.setFormatter(formatter)
log.addHandler(file_handler)


class MockArgs(object):
    debug = None
    verbose = 0
    depth = None
    quiet = False
    compare_content = False
    exclude_patterns = None
    use_magic_file_type = False
    jobs = None
    output_format = "diff"
    pretty = False
    color = "never"
    no_color = False
    source_dir = None
    target_dir = None
