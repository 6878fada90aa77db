from abc import ABC, abstractmethod


class StorageClientInterface(ABC):
    """
    一个抽象基类 (ABC)，定义了所有存储客户端必须实现的统一接口。
    这确保了 FileService 可以与任何存储后端以相同的方式进行交互。
    所有方法都是阻塞调用，由 FileService 放到线程池中执行。
    """

    @abstractmethod
    def remove_object(self, object_name: str):
        """删除一个对象。"""
        pass

    @abstractmethod
    def get_presigned_url(self, client_method: str, object_name: str, expires_in: int) -> str:
        """
        生成预签名 URL。
        :param client_method: 'get_object'
        """
        pass

    @abstractmethod
    def build_final_url(self, object_name: str) -> str:
        """构建最终的可公开访问 URL。"""
        pass

    @abstractmethod
    def stat_object(self, object_name: str):
        """获取对象的元数据（常用于检查存在性）。"""
        pass
