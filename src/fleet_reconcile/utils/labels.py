"""Cluster API label keys and selector helpers."""


class CAPILabels:
    """Well-known Cluster API labels."""

    CLUSTER_NAME = "cluster.x-k8s.io/cluster-name"
    DEPLOYMENT_NAME = "cluster.x-k8s.io/deployment-name"

    @staticmethod
    def filter_selector(**labels: str) -> str:
        """Build a label selector string from key/value pairs."""
        return ",".join(f"{k}={v}" for k, v in labels.items())

    @classmethod
    def cluster_selector(cls, cluster_name: str) -> str:
        """Selector matching every object belonging to a cluster."""
        return cls.filter_selector(**{cls.CLUSTER_NAME: cluster_name})

    @classmethod
    def deployment_selector(cls, deployment_name: str) -> str:
        """Selector matching the machines of a MachineDeployment."""
        return cls.filter_selector(**{cls.DEPLOYMENT_NAME: deployment_name})
