#!/usr/bin/python
import os
import sys
import unittest

# simple magic for using scripts within a source tree
basedir = os.path.dirname(os.path.dirname(os.path.dirname(
    os.path.abspath(__file__))))
if os.path.isdir(os.path.join(basedir, 'virtcap')):
    sys.path.append(basedir)

from virtcap.assoc import ALL_EDGES, AssocInfo
from virtcap.assoc import settings_define_capabilities as sdc
from virtcap.assoc.base import (classify_value_range, make_ref_valuerole,
                                match_hypervisor_prefix)
from virtcap.engine import CapabilityEngine
from virtcap.errors import InvalidIdentifier, NotFound, UnsupportedOperation
from virtcap.instance import Instance, ObjectPath
from virtcap.svpc_types import ValueRange, ValueRole
from virtcap.utils_config import EngineConfig

import fakes


def make_engine(host, config=None):
    return CapabilityEngine(host, fakes.FakeDeviceProvider(host),
                            fakes.FakePoolProvider(host), config=config)


def path(classname, iid):
    return ObjectPath(classname, "root/virt", {"InstanceID": iid})


class TestValueRole(unittest.TestCase):

    def setUp(self):
        self.engine = make_engine(fakes.sample_host())
        self.source = path("Xen_AllocationCapabilities", "MemoryPool/0")

    def ref_for(self, iid):
        target = Instance("Xen_MemResourceAllocationSettingData", "root/virt")
        target.set_property("InstanceID", iid)
        return make_ref_valuerole(self.engine, self.source, target, None,
                                  sdc.EDGES[0])

    def test_default(self):
        ref_inst = self.ref_for("Xen:Default-xxxx")
        self.assertEqual(ref_inst["ValueRole"], ValueRole.DEFAULT)
        self.assertEqual(ref_inst["ValueRange"], ValueRange.POINT)
        self.assertEqual(ref_inst["PropertyPolicy"], 0)

    def test_maximum(self):
        ref_inst = self.ref_for("Xen:Maximum-xxxx")
        self.assertEqual(ref_inst["ValueRole"], ValueRole.SUPPORTED)
        self.assertEqual(ref_inst["ValueRange"], ValueRange.MAXIMUMS)
        self.assertEqual(ref_inst["PropertyPolicy"], 0)

    def test_minimum_and_increment(self):
        self.assertEqual(self.ref_for("Minimum")["ValueRange"],
                         ValueRange.MINIMUMS)
        self.assertEqual(self.ref_for("Increment")["ValueRange"],
                         ValueRange.INCREMENTS)

    def test_unmatched_id(self):
        ref_inst = self.ref_for("Xen:Other-xxxx")
        self.assertNotIn("ValueRange", ref_inst)
        self.assertEqual(ref_inst["ValueRole"], ValueRole.SUPPORTED)
        self.assertEqual(ref_inst["PropertyPolicy"], 0)

    def test_missing_id(self):
        target = Instance("Xen_MemResourceAllocationSettingData", "root/virt")
        ref_inst = make_ref_valuerole(self.engine, self.source, target, None,
                                      sdc.EDGES[0])
        self.assertNotIn("ValueRole", ref_inst)
        self.assertEqual(ref_inst.classname, "Xen_SettingsDefineCapabilities")

    def test_token_precedence(self):
        self.assertEqual(classify_value_range("Default-Maximum"),
                         ValueRange.POINT)
        self.assertEqual(classify_value_range("Maximum-Increment"),
                         ValueRange.INCREMENTS)
        self.assertIsNone(classify_value_range("default"))


class TestAllocationCapabilities(unittest.TestCase):

    def setUp(self):
        self.host = fakes.sample_host()
        self.engine = make_engine(self.host)
        self.ref = path("KVM_AllocationCapabilities", "MemoryPool/0")

    def test_four_settings_with_pool(self):
        insts = self.engine.associators(self.ref)
        self.assertEqual(len(insts), 4)
        for inst in insts:
            self.assertEqual(inst.classname,
                             "KVM_MemResourceAllocationSettingData")
            self.assertEqual(inst["PoolID"], "MemoryPool/0")
        self.assertEqual([inst["InstanceID"] for inst in insts],
                         ["Minimum", "Maximum", "Default", "Increment"])

    def test_references(self):
        refs = self.engine.references(self.ref)
        self.assertEqual(len(refs), 4)
        roles = {}
        for ref_inst in refs:
            self.assertEqual(ref_inst.classname,
                             "KVM_SettingsDefineCapabilities")
            self.assertEqual(ref_inst["GroupComponent"], self.ref)
            part = ref_inst["PartComponent"]
            roles[part.get_key("InstanceID")] = (ref_inst["ValueRole"],
                                                 ref_inst["ValueRange"])
        self.assertEqual(roles["Default"],
                         (ValueRole.DEFAULT, ValueRange.POINT))
        self.assertEqual(roles["Minimum"],
                         (ValueRole.SUPPORTED, ValueRange.MINIMUMS))
        self.assertEqual(roles["Maximum"],
                         (ValueRole.SUPPORTED, ValueRange.MAXIMUMS))
        self.assertEqual(roles["Increment"],
                         (ValueRole.SUPPORTED, ValueRange.INCREMENTS))

    def test_unknown_pool_type(self):
        ref = path("KVM_AllocationCapabilities", "FooPool/0")
        self.assertRaises(InvalidIdentifier, self.engine.associators, ref)

    def test_rasd_to_capabilities_unsupported(self):
        ref = path("KVM_MemResourceAllocationSettingData", "guest1/mem")
        self.assertRaises(UnsupportedOperation,
                          self.engine.resolve_association, sdc.EDGES[1], ref)

    def test_provider_prefix_mismatch(self):
        engine = make_engine(self.host, EngineConfig(provider_prefix="Xen"))
        self.assertEqual(engine.associators(self.ref), [])
        self.assertEqual(self.host.opened, [])

    def test_result_class_of_other_hypervisor(self):
        info = AssocInfo(result_class="Xen_MemResourceAllocationSettingData")
        self.assertEqual(self.engine.associators(self.ref, info), [])

    def test_generic_result_class(self):
        info = AssocInfo(result_class="CIM_ResourceAllocationSettingData")
        self.assertEqual(len(self.engine.associators(self.ref, info)), 4)
        info = AssocInfo(result_class="CIM_SettingData")
        self.assertEqual(len(self.engine.associators(self.ref, info)), 4)

    def test_generic_result_class_of_other_base(self):
        info = AssocInfo(result_class="CIM_DiskPool")
        self.assertEqual(self.engine.associators(self.ref, info), [])
        info = AssocInfo(
            result_class="CIM_DiskResourceAllocationSettingData")
        self.assertEqual(self.engine.associators(self.ref, info), [])

    def test_result_class_filter(self):
        info = AssocInfo(result_class="KVM_DiskResourceAllocationSettingData")
        self.assertEqual(self.engine.associators(self.ref, info), [])

    def test_assoc_class_filter(self):
        info = AssocInfo(assoc_class="KVM_ResourceAllocationFromPool")
        self.assertEqual(self.engine.associators(self.ref, info), [])
        info = AssocInfo(assoc_class="KVM_SettingsDefineCapabilities")
        self.assertEqual(len(self.engine.associators(self.ref, info)), 4)

    def test_generic_assoc_class_filter(self):
        info = AssocInfo(assoc_class="CIM_SettingsDefineCapabilities")
        self.assertEqual(len(self.engine.associators(self.ref, info)), 4)
        info = AssocInfo(assoc_class="CIM_Component")
        self.assertEqual(len(self.engine.associators(self.ref, info)), 4)
        info = AssocInfo(assoc_class="CIM_ResourceAllocationFromPool")
        self.assertEqual(self.engine.associators(self.ref, info), [])
        info = AssocInfo(assoc_class="CIM_Whatever")
        self.assertEqual(self.engine.associators(self.ref, info), [])

    def test_role_filter(self):
        info = AssocInfo(role="PartComponent")
        self.assertEqual(self.engine.associators(self.ref, info), [])
        info = AssocInfo(role="GroupComponent", result_role="PartComponent")
        self.assertEqual(len(self.engine.associators(self.ref, info)), 4)

    def test_ref_is_not_a_source(self):
        ref = path("KVM_DiskPool", "DiskPool/default")
        self.assertRaises(InvalidIdentifier, self.engine.resolve_association,
                          sdc.EDGES[0], ref)


class TestHypervisorPrefix(unittest.TestCase):

    def test_no_filter(self):
        ref = path("KVM_DiskPool", "DiskPool/default")
        self.assertTrue(match_hypervisor_prefix(ref, None))
        self.assertTrue(match_hypervisor_prefix(ref, None, "KVM"))
        self.assertFalse(match_hypervisor_prefix(ref, None, "LXC"))

    def test_generic_classes(self):
        ref = path("Xen_DiskPool", "DiskPool/default")
        info = AssocInfo(assoc_class="CIM_ResourceAllocationFromPool",
                         result_class="Xen_DiskResourceAllocationSettingData")
        self.assertTrue(match_hypervisor_prefix(ref, info))
        info = AssocInfo(assoc_class="KVM_ResourceAllocationFromPool")
        self.assertFalse(match_hypervisor_prefix(ref, info))


class TestMigration(unittest.TestCase):

    def setUp(self):
        self.engine = make_engine(fakes.sample_host())

    def test_caps_to_setting_data(self):
        ref = path("KVM_VirtualSystemMigrationCapabilities",
                   "MigrationCapabilities")
        insts = self.engine.associators(ref)
        self.assertEqual(len(insts), 1)
        self.assertEqual(insts[0].classname,
                         "KVM_VirtualSystemMigrationSettingData")
        self.assertEqual(insts[0]["InstanceID"], "MigrationSettingData")
        self.assertEqual(insts[0]["MigrationType"], 2)

    def test_setting_data_to_caps(self):
        ref = path("Xen_VirtualSystemMigrationSettingData",
                   "MigrationSettingData")
        insts = self.engine.associators(ref)
        self.assertEqual(len(insts), 1)
        self.assertEqual(insts[0].classname,
                         "Xen_VirtualSystemMigrationCapabilities")
        self.assertEqual(insts[0]["SynchronousMethodsSupported"], [2, 3])

    def test_bad_source(self):
        ref = path("KVM_VirtualSystemMigrationCapabilities", "Bogus")
        self.assertRaises(NotFound, self.engine.associators, ref)
        ref = path("KVM_VirtualSystemMigrationSettingData", "Bogus")
        self.assertRaises(NotFound, self.engine.associators, ref)


class TestDefaultProfiles(unittest.TestCase):

    def setUp(self):
        self.host = fakes.sample_host()
        self.engine = make_engine(self.host)

    def profiles(self, prefix):
        ref = path("%s_VirtualSystemManagementCapabilities" % prefix,
                   "ManagementCapabilities")
        return self.engine.associators(ref)

    def test_xen_with_hvm(self):
        insts = self.profiles("Xen")
        self.assertEqual(len(insts), 2)
        names = [inst["VirtualSystemIdentifier"] for inst in insts]
        self.assertEqual(names, ["Xen_Paravirt_Guest", "Xen_Fullvirt_Guest"])
        self.assertFalse(insts[0]["isFullVirt"])
        self.assertEqual(insts[0]["Bootloader"], "/usr/bin/pygrub")
        self.assertTrue(insts[1]["isFullVirt"])
        self.assertEqual(insts[1]["BootDevice"], "hda")
        for inst in insts:
            self.assertEqual(inst.classname, "Xen_VirtualSystemSettingData")
            self.assertTrue(inst["InstanceID"].startswith("Xen:"))
        self.assertNotEqual(insts[0]["InstanceID"], insts[1]["InstanceID"])
        self.assertTrue(self.host.all_closed())

    def test_xen_without_hvm(self):
        self.host.capabilities = "<capabilities><guest><os_type>xen" \
                                 "</os_type></guest></capabilities>"
        insts = self.profiles("Xen")
        self.assertEqual(len(insts), 1)
        self.assertEqual(insts[0]["VirtualSystemIdentifier"],
                         "Xen_Paravirt_Guest")

    def test_kvm(self):
        insts = self.profiles("KVM")
        self.assertEqual(len(insts), 1)
        self.assertEqual(insts[0]["VirtualSystemIdentifier"], "KVM_guest")
        self.assertEqual(insts[0]["BootDevice"], "hda")

    def test_lxc(self):
        insts = self.profiles("LXC")
        self.assertEqual(len(insts), 1)
        self.assertEqual(insts[0]["InitPath"], "/sbin/init")
        self.assertTrue(insts[0]["InstanceID"].startswith("LXC:"))


class TestEdgeTable(unittest.TestCase):

    def test_every_source_class_is_typed(self):
        for edge in ALL_EDGES:
            for classname in edge.source_classes | edge.target_classes:
                self.assertIn(classname.split("_", 1)[0],
                              ("Xen", "KVM", "LXC"))

    def test_no_lxc_pool_edges(self):
        ref = path("LXC_MemoryPool", "MemoryPool/0")
        engine = make_engine(fakes.sample_host())
        self.assertEqual(engine.find_edges(ref), [])
        self.assertEqual(engine.associators(ref), [])


if __name__ == '__main__':
    unittest.main()
