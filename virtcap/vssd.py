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
Default virtual system setting data profiles offered by a hypervisor.

    * Xen: a paravirtualized profile, plus a fully virtualized one when the
      host supports hardware virtualization ("hvm" in the capabilities)
    * KVM: a single fully virtualized profile
    * LXC: a single container profile
"""

import logging
import uuid

from virtcap import defaults, utils_classname
from virtcap.svpc_types import Backend

LOG = logging.getLogger("avocado." + __name__)

VSSD_BASE = "VirtualSystemSettingData"


def system_has_vt(conn):
    """
    Check if the host supports hardware virtualization
    """
    caps = conn.get_capabilities()
    return caps is not None and "hvm" in caps


class VSSDGenerator(object):

    def __init__(self, connections, instances):
        self._connections = connections
        self._instances = instances

    def default_vssd_instance(self, prefix, namespace):
        inst = self._instances.new_typed_instance(
            "%s_%s" % (prefix, VSSD_BASE), VSSD_BASE, namespace)
        inst.set_property("InstanceID", "%s:%s" % (prefix, uuid.uuid4()),
                          "string")
        return inst

    def _base_vssd(self, prefix, namespace, name):
        inst = self.default_vssd_instance(prefix, namespace)
        inst.set_property("VirtualSystemIdentifier", name, "string")
        return inst

    def _xen_vssds(self, conn, prefix, namespace):
        inst = self._base_vssd(prefix, namespace, "Xen_Paravirt_Guest")
        inst.set_property("Bootloader", defaults.XEN_PV_BOOTLOADER, "string")
        inst.set_property("isFullVirt", False, "boolean")
        vssds = [inst]

        if system_has_vt(conn):
            inst = self._base_vssd(prefix, namespace, "Xen_Fullvirt_Guest")
            inst.set_property("BootDevice", defaults.FV_BOOT_DEVICE, "string")
            inst.set_property("isFullVirt", True, "boolean")
            vssds.append(inst)
        return vssds

    def _kvm_vssds(self, conn, prefix, namespace):
        inst = self._base_vssd(prefix, namespace, "KVM_guest")
        inst.set_property("BootDevice", defaults.FV_BOOT_DEVICE, "string")
        return [inst]

    def _lxc_vssds(self, conn, prefix, namespace):
        inst = self.default_vssd_instance(prefix, namespace)
        inst.set_property("InitPath", defaults.LXC_INIT_PATH, "string")
        return [inst]

    def vssds_for(self, ref):
        """
        Generate the default profiles of the hypervisor of ``ref``

        :param ref: ObjectPath of a management capabilities object
        :return: list of Instance
        :raise InvalidIdentifier: if ``ref`` names no known hypervisor
        """
        backend = utils_classname.backend_from_classname(ref.classname)
        generators = {
            Backend.XEN: self._xen_vssds,
            Backend.KVM: self._kvm_vssds,
            Backend.LXC: self._lxc_vssds,
        }
        with self._connections.connect(ref.classname) as conn:
            vssds = generators[backend](conn, backend.prefix, ref.namespace)
        LOG.debug("%d default profiles for %s", len(vssds), backend.prefix)
        return vssds
