from .azure import from_azure_cloud_event, to_azure_cloud_event

__all__ = ["from_azure_cloud_event", "to_azure_cloud_event"]
