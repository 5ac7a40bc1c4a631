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

"""
Avocado plugin listing the resource bounds a hypervisor accepts
"""

from avocado.core import exit_codes
from avocado.core.output import LOG_UI
from avocado.core.plugin_interfaces import CLICmd
from avocado.core.settings import settings

from virtcap import utils_classname
from virtcap.engine import CapabilityEngine
from virtcap.errors import CapabilityError
from virtcap.instance import ObjectPath
from virtcap.utils_config import ConfigError, EngineConfig


class VTCapabilities(CLICmd):

    """
    Implements the vt-capabilities command
    """

    name = 'vt-capabilities'
    description = "Show the resource bounds accepted by a hypervisor"

    def configure(self, parser):
        parser = super(VTCapabilities, self).configure(parser)

        # [vt.capabilities] section
        section = 'vt.capabilities'

        settings.register_option(section, key='config', default=None,
                                 help_msg='Engine configuration file',
                                 parser=parser, long_arg='--virtcap-config')
        settings.register_option(section, key='hypervisor', default='KVM',
                                 help_msg='Hypervisor prefix (Xen, KVM, LXC)',
                                 parser=parser, long_arg='--hypervisor')
        settings.register_option(section, key='pool', default='MemoryPool/0',
                                 help_msg='Pool whose bounds are listed',
                                 parser=parser, long_arg='--pool')

    def run(self, config):
        path = config.get('vt.capabilities.config')
        try:
            engine_config = EngineConfig.from_file(path) if path \
                else EngineConfig()
        except ConfigError as detail:
            LOG_UI.error("Invalid configuration: %s", detail)
            return exit_codes.AVOCADO_FAIL

        hypervisor = config.get('vt.capabilities.hypervisor')
        pool_id = config.get('vt.capabilities.pool')
        ref = ObjectPath("%s_AllocationCapabilities" % hypervisor,
                         engine_config.namespace, {"InstanceID": pool_id})

        try:
            utils_classname.backend_from_classname(ref.classname)
            engine = CapabilityEngine.from_config(engine_config)
            insts = engine.associators(ref)
        except CapabilityError as detail:
            LOG_UI.error("%s: %s", detail.status, detail)
            return exit_codes.AVOCADO_FAIL

        for inst in insts:
            units = (inst.get_property("AllocationUnits") or
                     inst.get_property("AllocationQuantity") or "")
            LOG_UI.info("%-10s %s %s", inst["InstanceID"],
                        inst["VirtualQuantity"], units)
        return exit_codes.AVOCADO_ALL_OK
