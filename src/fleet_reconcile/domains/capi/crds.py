"""CRD definitions for Cluster API and Cloud Director provider resources."""

from fleet_reconcile.clients.base import CRDDefinition


class CAPICRDs:
    """Cluster API core, control plane, bootstrap and VCD infrastructure CRDs."""

    CLUSTER = CRDDefinition(
        group="cluster.x-k8s.io",
        version="v1beta1",
        plural="clusters",
        kind="Cluster",
    )

    MACHINE_DEPLOYMENT = CRDDefinition(
        group="cluster.x-k8s.io",
        version="v1beta1",
        plural="machinedeployments",
        kind="MachineDeployment",
    )

    MACHINE = CRDDefinition(
        group="cluster.x-k8s.io",
        version="v1beta1",
        plural="machines",
        kind="Machine",
    )

    KUBEADM_CONTROL_PLANE = CRDDefinition(
        group="controlplane.cluster.x-k8s.io",
        version="v1beta1",
        plural="kubeadmcontrolplanes",
        kind="KubeadmControlPlane",
    )

    KUBEADM_CONFIG_TEMPLATE = CRDDefinition(
        group="bootstrap.cluster.x-k8s.io",
        version="v1beta1",
        plural="kubeadmconfigtemplates",
        kind="KubeadmConfigTemplate",
    )

    VCD_CLUSTER = CRDDefinition(
        group="infrastructure.cluster.x-k8s.io",
        version="v1beta3",
        plural="vcdclusters",
        kind="VCDCluster",
    )

    VCD_MACHINE_TEMPLATE = CRDDefinition(
        group="infrastructure.cluster.x-k8s.io",
        version="v1beta3",
        plural="vcdmachinetemplates",
        kind="VCDMachineTemplate",
    )

    CLUSTER_RESOURCE_SET_BINDING = CRDDefinition(
        group="addons.cluster.x-k8s.io",
        version="v1beta1",
        plural="clusterresourcesetbindings",
        kind="ClusterResourceSetBinding",
    )

    @classmethod
    def all_crds(cls) -> list[CRDDefinition]:
        """Return the CRD definitions the reconciler needs served.

        ClusterResourceSetBinding is left out: the addons API is optional.
        """
        return [
            cls.CLUSTER,
            cls.MACHINE_DEPLOYMENT,
            cls.MACHINE,
            cls.KUBEADM_CONTROL_PLANE,
            cls.KUBEADM_CONFIG_TEMPLATE,
            cls.VCD_CLUSTER,
            cls.VCD_MACHINE_TEMPLATE,
        ]
