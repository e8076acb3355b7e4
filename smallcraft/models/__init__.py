from smallcraft.models.base import Base  # noqa: F401
from smallcraft.models.design import SmallCraftDesign  # noqa: F401
