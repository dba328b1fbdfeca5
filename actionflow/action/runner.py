"""Action 执行流水线 / Action Pipeline

串联请求构建、请求执行、结果后处理与标识符匿名化。
Chains request construction, execution, output post-processing and identifier
anonymization into one call.
"""

from typing import Any, Dict, Mapping, Optional, Tuple

from actionflow.utils.config import Config
from actionflow.utils.log import logger

from .executor import make_http_request, make_http_request_async
from .identifiers import IdPredicate, is_id, re_add_ids, remove_ids
from .model import (
    Action,
    ActionResult,
    Organization,
    RequestOptions,
    StreamCallback,
)
from .postprocess import process_api_output
from .request import construct_http_request


class ActionRunner:
    """Action 调用入口 / Entry point used by the orchestration layer

    Examples:
        >>> runner = ActionRunner(Config(local_hostname="http://localhost:3000"))
        >>> result = runner.run(action, {"id": "ID1"}, org, id_store=store)
        >>> result.output, result.id_store
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        is_id: IdPredicate = is_id,
    ):
        self._config = Config.with_configs(config)
        self._is_id = is_id

    def _prepare(
        self,
        action: Action,
        parameters: Optional[Mapping[str, Any]],
        organization: Organization,
        user_api_key: Optional[str],
        id_store: Optional[Dict[str, str]],
        mock_api_responses: bool,
        stream: Optional[StreamCallback],
    ) -> Tuple[str, RequestOptions]:
        params: Dict[str, Any] = dict(parameters or {})
        if id_store:
            params = re_add_ids(params, id_store)

        if mock_api_responses:
            action = action.model_copy(
                update={"api_host": self._config.get_mock_api_host()}
            )
            logger.debug(
                "mock mode enabled, routing %s to %s",
                action.name,
                action.api_host,
            )

        return construct_http_request(
            action,
            params,
            organization,
            user_api_key=user_api_key,
            stream=stream,
            config=self._config,
        )

    def _finish(
        self, output: Any, action: Action, id_store: Optional[Dict[str, str]]
    ) -> ActionResult:
        processed = process_api_output(output, action)
        cleaned, store = remove_ids(processed, id_store, is_id=self._is_id)
        return ActionResult(output=cleaned, id_store=store)

    def run(
        self,
        action: Action,
        parameters: Optional[Mapping[str, Any]],
        organization: Organization,
        user_api_key: Optional[str] = None,
        id_store: Optional[Dict[str, str]] = None,
        mock_api_responses: bool = False,
        stream: Optional[StreamCallback] = None,
    ) -> ActionResult:
        """执行 action / Run one action end to end

        Args:
            action: action 描述 / Action descriptor
            parameters: 模型给出的参数, 可包含 ID<n> 标记 / Parameters, may hold ID<n> tokens
            organization: 组织上下文 / Organization context
            user_api_key: 用户 API Key / User API key
            id_store: 之前生成的查找表 / Lookup table from earlier calls
            mock_api_responses: 是否使用 mock 接口 / Route to the stub backend
            stream: 调试事件回调 / Debug event sink

        Returns:
            ActionResult: 匿名化后的输出和扩展后的查找表
        """
        url, request_options = self._prepare(
            action,
            parameters,
            organization,
            user_api_key,
            id_store,
            mock_api_responses,
            stream,
        )
        output = make_http_request(
            url,
            request_options,
            self._config.get_local_hostname(),
            config=self._config,
        )
        return self._finish(output, action, id_store)

    async def run_async(
        self,
        action: Action,
        parameters: Optional[Mapping[str, Any]],
        organization: Organization,
        user_api_key: Optional[str] = None,
        id_store: Optional[Dict[str, str]] = None,
        mock_api_responses: bool = False,
        stream: Optional[StreamCallback] = None,
    ) -> ActionResult:
        """异步执行 action / Async twin of run"""
        url, request_options = self._prepare(
            action,
            parameters,
            organization,
            user_api_key,
            id_store,
            mock_api_responses,
            stream,
        )
        output = await make_http_request_async(
            url,
            request_options,
            self._config.get_local_hostname(),
            config=self._config,
        )
        return self._finish(output, action, id_store)
