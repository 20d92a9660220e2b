"""
どこで: `engine.runtime` サブパッケージ。
何を: 1 回のアニメーション呼び出しを FrameTask に分割し、スレッドプールで並行生成する fork-join 実行層。
なぜ: 生成（描画 + PNG 保存）を並行化しつつ、フレームカウンタの確定を全成功時の 1 回に限るため。
"""
