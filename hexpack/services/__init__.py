from hexpack.services.package_service import PackageService

__all__ = ["PackageService"]
