# The registry of built-in level layout factories
LAYOUT_REGISTRY = {}

def register_layout(name: str):
    def deco(func):
        LAYOUT_REGISTRY[name] = func
        return func
    return deco
