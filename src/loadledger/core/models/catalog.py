"""Catalog Domain Model -- 物料目录与操作者目录

两者均由外部维护，核心层只读。
"""

from pydantic import BaseModel, Field


class Material(BaseModel):
    """物料目录项

    active=False 的物料不会出现在任何执行视图中。
    """

    id: str = Field(description="唯一标识，UUID 格式")
    number: int = Field(description="序号（排序键）")
    name: str = Field(description="显示名称")
    unit: str = Field(default="szt.", description="计量单位")
    image_url: str | None = Field(default=None, description="图片地址")
    active: bool = Field(default=True, description="是否启用")


class Actor(BaseModel):
    """已知操作者"""

    id: str = Field(description="唯一标识，UUID 格式")
    login: str = Field(default="", description="登录名")
