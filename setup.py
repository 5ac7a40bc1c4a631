# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.
#
# See LICENSE for more details.
#
# Copyright: Red Hat Inc. 2026

import os
import shutil
from pathlib import Path
from setuptools import Command, setup, find_packages

VERSION = open('VERSION', 'r').read().strip()


class Clean(Command):
    """Our custom command to get rid of scratch files after build."""

    description = "Get rid of scratch, byte files and build stuff."
    user_options = []

    def initialize_options(self):
        pass

    def finalize_options(self):
        pass

    def run(self):
        cleaning_list = ["MANIFEST", "PYPI_UPLOAD", "./build", "./dist",
                         "./virtcap.egg-info"]

        cleaning_list += list(Path('.').rglob("*.pyc"))
        cleaning_list += list(Path('.').rglob("__pycache__"))

        for e in cleaning_list:
            if not os.path.exists(e):
                continue
            if os.path.isfile(e):
                os.remove(e)
            if os.path.isdir(e):
                shutil.rmtree(e)


if __name__ == "__main__":
    setup(name='virtcap',
          version=VERSION,
          description='Capability and association engine for '
                      'virtualization management providers',
          author='Avocado Developers',
          author_email='avocado-devel@redhat.com',
          url='http://github.com/avocado-framework/avocado-vt',
          packages=find_packages(exclude=('selftests*',)),
          include_package_data=True,
          package_data={'virtcap': ['conf.d/*.conf']},
          entry_points={
              'avocado.plugins.cli.cmd': [
                  'vt-capabilities = virtcap.plugins.vt_capabilities:VTCapabilities',
                  ],
              },
          install_requires=["avocado-framework>=68.0"],
          cmdclass={'clean': Clean},
          )
