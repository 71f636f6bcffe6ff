"""kubescout: ownership inference, relation graphs and GitOps pattern synthesis for Kubernetes."""

__version__ = "0.1.0"
