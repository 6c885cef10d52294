"""数据模型模块.

主要模型:
- User: 用户账号
- Site / SiteMembership / MembershipRole: 站点、站点成员关系与成员角色
- Post: 文章(用于统计作者的已发布文章数)
- SiteOption: 站点选项(待激活邀请存放于 `new_user_<key>` 选项)
- Signup: 自助注册记录
- UserMeta: 用户偏好设置
"""

__all__ = [
    "MembershipRole",
    "Post",
    "Signup",
    "Site",
    "SiteMembership",
    "SiteOption",
    "User",
    "UserMeta",
]


def __getattr__(name: str):
    """延迟加载模型, 避免初始化周期引发的循环导入."""

    if name not in __all__:
        msg = f"module 'app.models' has no attribute {name}"
        raise AttributeError(msg)

    from importlib import import_module

    module_map = {
        "MembershipRole": "app.models.site",
        "Post": "app.models.post",
        "Signup": "app.models.signup",
        "Site": "app.models.site",
        "SiteMembership": "app.models.site",
        "SiteOption": "app.models.site_option",
        "User": "app.models.user",
        "UserMeta": "app.models.user_meta",
    }

    module = import_module(module_map[name])
    value = getattr(module, name)
    globals()[name] = value
    return value
