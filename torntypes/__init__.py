import importlib

mod = "torntypes"
class LazyLoader:
    """
    Lazy loader for the torntypes functions to speed up startup time.
    """
    def __init__(self, mappings):
        self._modules = {}
        self._mappings = mappings

    def _load_module(self, module_name):
        if module_name not in self._modules:
            self._modules[module_name] = importlib.import_module(module_name)
        return self._modules[module_name]

    def __getattr__(self, item):
        if item in self._mappings:
            module_name, func_name = self._mappings[item]
            module = self._load_module(module_name)
            return getattr(module, func_name)
        else:
            return self._load_module(f"{mod}.{item}")

# Define the functions and their corresponding module paths
_mappings = {
    "convert_torn_v1_schema_to_typescript": (f"{mod}.tornv1tots", "convert_torn_v1_schema_to_typescript"),
    "convert_openapi_to_typescript": (f"{mod}.openapitots", "convert_openapi_to_typescript"),
    "generate_v1_types": (f"{mod}.torntypes", "generate_v1_types"),
    "generate_v2_types": (f"{mod}.torntypes", "generate_v2_types"),
    "generate_types": (f"{mod}.torntypes", "generate_types"),
    "TornApiClient": (f"{mod}.tornapi", "TornApiClient"),
}

_lazy_loader = LazyLoader(_mappings)

def __getattr__(name):
    return getattr(_lazy_loader, name)
