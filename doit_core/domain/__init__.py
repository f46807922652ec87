"""领域层模型与协议。

包含：
- models: Task / ChatMessage / 请求与 ResponseRecord 模型。
- conversation: 单次会话的 ConversationHistory。
- exceptions: 业务异常类型定义。
"""
