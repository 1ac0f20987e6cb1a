"""Built-in learner catalog for LearnerIndex.

Learners wrap scikit-learn estimators and, where installed, xgboost, lightgbm,
catboost, hdbscan, scikit-learn-extra and scikit-survival. Factories import
their package only when called, so building the catalog never loads them.

Cost-sensitive learning is only available through wrappers, none of which are
basic learners, so there are no built-in "costsens" entries.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List

from .learner_registry import HyperParamSpec, LearnerCard, LearnerRegistry
from ..utils.errors import RegistryError


# ---- Factory helpers ----

def _make_estimator(cls_path: str) -> Callable[[Dict[str, Any]], Any]:
    def _f(params: Dict[str, Any]) -> Any:
        module_name, class_name = cls_path.rsplit(".", 1)
        mod = __import__(module_name, fromlist=[class_name])
        cls = getattr(mod, class_name)
        return cls(**params)

    return _f


def _make_hdbscan(params: Dict[str, Any]) -> Any:
    import hdbscan

    return hdbscan.HDBSCAN(**params)


def _make_kmedoids(params: Dict[str, Any]) -> Any:
    from sklearn_extra.cluster import KMedoids

    return KMedoids(**params)


_TREE_CLASSIF = ["numerics", "missings", "weights", "twoclass", "multiclass", "prob", "class_weights", "featimp"]
_TREE_REGR = ["numerics", "missings", "weights", "featimp"]
_BOOST_CLASSIF = ["numerics", "missings", "weights", "twoclass", "multiclass", "prob", "featimp"]
_BOOST_REGR = ["numerics", "missings", "weights", "featimp"]


def _classif_cards() -> List[LearnerCard]:
    return [
        LearnerCard(
            cl="classif.logreg",
            name="Logistic Regression",
            short_name="logreg",
            package=["sklearn"],
            properties=["numerics", "weights", "twoclass", "multiclass", "prob", "class_weights"],
            params=[HyperParamSpec("C", 1.0, "float", 1e-6, 1e6), HyperParamSpec("max_iter", 1000, "int", 10, 100000, 10)],
        ),
        LearnerCard(
            cl="classif.ridge",
            name="Ridge Classifier",
            short_name="ridge",
            package=["sklearn"],
            properties=["numerics", "weights", "twoclass", "multiclass", "class_weights"],
        ),
        LearnerCard(
            cl="classif.lda",
            name="Linear Discriminant Analysis",
            short_name="lda",
            package=["sklearn"],
            properties=["numerics", "twoclass", "multiclass", "prob"],
        ),
        LearnerCard(
            cl="classif.qda",
            name="Quadratic Discriminant Analysis",
            short_name="qda",
            package=["sklearn"],
            properties=["numerics", "twoclass", "multiclass", "prob"],
        ),
        LearnerCard(
            cl="classif.naive_bayes",
            name="Gaussian Naive Bayes",
            short_name="nbayes",
            package=["sklearn"],
            properties=["numerics", "weights", "twoclass", "multiclass", "prob"],
        ),
        LearnerCard(
            cl="classif.knn",
            name="k-Nearest Neighbors",
            short_name="knn",
            package=["sklearn"],
            properties=["numerics", "twoclass", "multiclass", "prob"],
            params=[HyperParamSpec("n_neighbors", 5, "int", 1, 200, 1)],
        ),
        LearnerCard(
            cl="classif.svm",
            name="Support Vector Machine",
            short_name="svm",
            package=["sklearn"],
            properties=["numerics", "weights", "twoclass", "multiclass", "prob", "class_weights"],
            note="probability is set to True by default so that predict_type 'prob' works.",
            params=[
                HyperParamSpec("C", 1.0, "float", 1e-6, 1e6),
                HyperParamSpec("kernel", "rbf", "choice", choices=["linear", "poly", "rbf", "sigmoid"]),
                HyperParamSpec("probability", True, "bool"),
            ],
        ),
        LearnerCard(
            cl="classif.decision_tree",
            name="Decision Tree",
            short_name="dtree",
            package=["sklearn"],
            properties=list(_TREE_CLASSIF),
            params=[HyperParamSpec("max_depth", None, "int", 1, 64, 1)],
        ),
        LearnerCard(
            cl="classif.random_forest",
            name="Random Forest",
            short_name="rf",
            package=["sklearn"],
            properties=_TREE_CLASSIF + ["oobpreds"],
            note="oob_score must be enabled to obtain out-of-bag predictions.",
            params=[HyperParamSpec("n_estimators", 500, "int", 10, 5000, 10)],
        ),
        LearnerCard(
            cl="classif.extra_trees",
            name="Extremely Randomized Trees",
            short_name="extratrees",
            package=["sklearn"],
            properties=["numerics", "weights", "twoclass", "multiclass", "prob", "class_weights", "featimp"],
            params=[HyperParamSpec("n_estimators", 500, "int", 10, 5000, 10)],
        ),
        LearnerCard(
            cl="classif.gbm",
            name="Gradient Boosting Machine",
            short_name="gbm",
            package=["sklearn"],
            properties=["numerics", "weights", "twoclass", "multiclass", "prob", "featimp"],
        ),
        LearnerCard(
            cl="classif.hist_gbm",
            name="Histogram-based Gradient Boosting",
            short_name="histgbm",
            package=["sklearn"],
            properties=["numerics", "factors", "missings", "weights", "twoclass", "multiclass", "prob", "class_weights"],
            note="Categorical features are taken from pandas category dtypes.",
            params=[HyperParamSpec("categorical_features", "from_dtype", "str")],
        ),
        LearnerCard(
            cl="classif.adaboost",
            name="AdaBoost",
            short_name="adaboost",
            package=["sklearn"],
            properties=["numerics", "weights", "twoclass", "multiclass", "prob", "featimp"],
        ),
        LearnerCard(
            cl="classif.mlp",
            name="Multilayer Perceptron",
            short_name="mlp",
            package=["sklearn"],
            properties=["numerics", "twoclass", "multiclass", "prob"],
            params=[HyperParamSpec("max_iter", 500, "int", 10, 10000, 10)],
        ),
        LearnerCard(
            cl="classif.xgboost",
            name="eXtreme Gradient Boosting",
            short_name="xgboost",
            package=["xgboost"],
            properties=list(_BOOST_CLASSIF),
        ),
        LearnerCard(
            cl="classif.lightgbm",
            name="Light Gradient Boosting Machine",
            short_name="lightgbm",
            package=["lightgbm"],
            properties=["numerics", "factors", "missings", "weights", "twoclass", "multiclass", "prob", "class_weights", "featimp"],
            params=[HyperParamSpec("verbose", -1, "int")],
        ),
        LearnerCard(
            cl="classif.catboost",
            name="CatBoost",
            short_name="catboost",
            package=["catboost"],
            properties=["numerics", "factors", "missings", "weights", "twoclass", "multiclass", "prob", "class_weights", "featimp"],
            note="verbose and allow_writing_files are off by default.",
            params=[HyperParamSpec("verbose", False, "bool"), HyperParamSpec("allow_writing_files", False, "bool")],
        ),
    ]


def _regr_cards() -> List[LearnerCard]:
    return [
        LearnerCard(cl="regr.lm", name="Linear Regression", short_name="lm", package=["sklearn"], properties=["numerics", "weights"]),
        LearnerCard(
            cl="regr.ridge",
            name="Ridge Regression",
            short_name="ridge",
            package=["sklearn"],
            properties=["numerics", "weights"],
            params=[HyperParamSpec("alpha", 1.0, "float", 1e-6, 1e3, 0.1)],
        ),
        LearnerCard(
            cl="regr.lasso",
            name="Lasso Regression",
            short_name="lasso",
            package=["sklearn"],
            properties=["numerics", "weights"],
            params=[HyperParamSpec("alpha", 0.001, "float", 1e-6, 10.0, 0.001)],
        ),
        LearnerCard(
            cl="regr.elasticnet",
            name="Elastic Net",
            short_name="elasticnet",
            package=["sklearn"],
            properties=["numerics", "weights"],
            params=[
                HyperParamSpec("alpha", 0.001, "float", 1e-6, 10.0, 0.001),
                HyperParamSpec("l1_ratio", 0.5, "float", 0.0, 1.0, 0.05),
            ],
        ),
        LearnerCard(
            cl="regr.bayesian_ridge",
            name="Bayesian Ridge Regression",
            short_name="bridge",
            package=["sklearn"],
            properties=["numerics", "weights", "se"],
            note="Standard errors come from predict(return_std=True).",
        ),
        LearnerCard(
            cl="regr.gausspr",
            name="Gaussian Process Regression",
            short_name="gausspr",
            package=["sklearn"],
            properties=["numerics", "se"],
        ),
        LearnerCard(cl="regr.decision_tree", name="Decision Tree", short_name="dtree", package=["sklearn"], properties=list(_TREE_REGR)),
        LearnerCard(
            cl="regr.random_forest",
            name="Random Forest",
            short_name="rf",
            package=["sklearn"],
            properties=_TREE_REGR + ["oobpreds"],
            params=[HyperParamSpec("n_estimators", 500, "int", 10, 5000, 10)],
        ),
        LearnerCard(
            cl="regr.extra_trees",
            name="Extremely Randomized Trees",
            short_name="extratrees",
            package=["sklearn"],
            properties=["numerics", "weights", "featimp"],
            params=[HyperParamSpec("n_estimators", 500, "int", 10, 5000, 10)],
        ),
        LearnerCard(cl="regr.gbm", name="Gradient Boosting Machine", short_name="gbm", package=["sklearn"], properties=["numerics", "weights", "featimp"]),
        LearnerCard(
            cl="regr.hist_gbm",
            name="Histogram-based Gradient Boosting",
            short_name="histgbm",
            package=["sklearn"],
            properties=["numerics", "factors", "missings", "weights"],
            params=[HyperParamSpec("categorical_features", "from_dtype", "str")],
        ),
        LearnerCard(cl="regr.knn", name="k-Nearest Neighbors", short_name="knn", package=["sklearn"], properties=["numerics"]),
        LearnerCard(cl="regr.svm", name="Support Vector Regression", short_name="svr", package=["sklearn"], properties=["numerics", "weights"]),
        LearnerCard(
            cl="regr.mlp",
            name="Multilayer Perceptron",
            short_name="mlp",
            package=["sklearn"],
            properties=["numerics"],
            params=[HyperParamSpec("max_iter", 500, "int", 10, 10000, 10)],
        ),
        LearnerCard(cl="regr.xgboost", name="eXtreme Gradient Boosting", short_name="xgboost", package=["xgboost"], properties=list(_BOOST_REGR)),
        LearnerCard(
            cl="regr.lightgbm",
            name="Light Gradient Boosting Machine",
            short_name="lightgbm",
            package=["lightgbm"],
            properties=["numerics", "factors", "missings", "weights", "featimp"],
            params=[HyperParamSpec("verbose", -1, "int")],
        ),
        LearnerCard(
            cl="regr.catboost",
            name="CatBoost",
            short_name="catboost",
            package=["catboost"],
            properties=["numerics", "factors", "missings", "weights", "featimp"],
            note="verbose and allow_writing_files are off by default.",
            params=[HyperParamSpec("verbose", False, "bool"), HyperParamSpec("allow_writing_files", False, "bool")],
        ),
    ]


def _cluster_cards() -> List[LearnerCard]:
    return [
        LearnerCard(
            cl="cluster.kmeans",
            name="K-Means",
            short_name="kmeans",
            package=["sklearn"],
            properties=["numerics", "weights"],
            params=[HyperParamSpec("n_clusters", 8, "int", 2, 200, 1), HyperParamSpec("n_init", "auto", "str")],
        ),
        LearnerCard(
            cl="cluster.minibatch_kmeans",
            name="Mini-Batch K-Means",
            short_name="mbkmeans",
            package=["sklearn"],
            properties=["numerics", "weights"],
            params=[HyperParamSpec("n_clusters", 8, "int", 2, 200, 1)],
        ),
        LearnerCard(
            cl="cluster.kmedoids",
            name="K-Medoids",
            short_name="kmedoids",
            package=["sklearn_extra"],
            properties=["numerics"],
        ),
        LearnerCard(cl="cluster.agglomerative", name="Agglomerative Clustering", short_name="agnes", package=["sklearn"], properties=["numerics"]),
        LearnerCard(cl="cluster.dbscan", name="DBSCAN", short_name="dbscan", package=["sklearn"], properties=["numerics", "weights"]),
        LearnerCard(
            cl="cluster.hdbscan",
            name="HDBSCAN",
            short_name="hdbscan",
            package=["hdbscan"],
            properties=["numerics", "prob"],
            note="Membership strengths are reported as probabilities.",
        ),
        LearnerCard(cl="cluster.gmm", name="Gaussian Mixture Model", short_name="gmm", package=["sklearn"], properties=["numerics", "prob"]),
    ]


def _surv_cards() -> List[LearnerCard]:
    # scikit-survival patches sklearn internals on import.
    return [
        LearnerCard(cl="surv.coxph", name="Cox Proportional Hazard Model", short_name="coxph", package=["!sksurv"], properties=["numerics", "rcens"]),
        LearnerCard(cl="surv.coxnet", name="Penalized Cox Model", short_name="coxnet", package=["!sksurv"], properties=["numerics", "rcens"]),
        LearnerCard(
            cl="surv.random_forest",
            name="Random Survival Forest",
            short_name="rsf",
            package=["!sksurv"],
            properties=["numerics", "rcens", "oobpreds"],
            params=[HyperParamSpec("n_estimators", 500, "int", 10, 5000, 10)],
        ),
        LearnerCard(
            cl="surv.gbm",
            name="Gradient Boosted Survival Model",
            short_name="gbm",
            package=["!sksurv"],
            properties=["numerics", "weights", "rcens", "featimp"],
        ),
    ]


def _multilabel_cards() -> List[LearnerCard]:
    return [
        LearnerCard(cl="multilabel.knn", name="k-Nearest Neighbors", short_name="knn", package=["sklearn"], properties=["numerics", "prob"]),
        LearnerCard(
            cl="multilabel.decision_tree",
            name="Decision Tree",
            short_name="dtree",
            package=["sklearn"],
            properties=["numerics", "missings", "weights", "prob"],
        ),
        LearnerCard(
            cl="multilabel.random_forest",
            name="Random Forest",
            short_name="rf",
            package=["sklearn"],
            properties=["numerics", "missings", "weights", "prob"],
            params=[HyperParamSpec("n_estimators", 500, "int", 10, 5000, 10)],
        ),
    ]


def register_builtin_learners(registry: LearnerRegistry) -> LearnerRegistry:
    """Register every built-in learner into ``registry``."""

    factories: Dict[str, Callable[[Dict[str, Any]], Any]] = {
        # Classification
        "classif.logreg": _make_estimator("sklearn.linear_model.LogisticRegression"),
        "classif.ridge": _make_estimator("sklearn.linear_model.RidgeClassifier"),
        "classif.lda": _make_estimator("sklearn.discriminant_analysis.LinearDiscriminantAnalysis"),
        "classif.qda": _make_estimator("sklearn.discriminant_analysis.QuadraticDiscriminantAnalysis"),
        "classif.naive_bayes": _make_estimator("sklearn.naive_bayes.GaussianNB"),
        "classif.knn": _make_estimator("sklearn.neighbors.KNeighborsClassifier"),
        "classif.svm": _make_estimator("sklearn.svm.SVC"),
        "classif.decision_tree": _make_estimator("sklearn.tree.DecisionTreeClassifier"),
        "classif.random_forest": _make_estimator("sklearn.ensemble.RandomForestClassifier"),
        "classif.extra_trees": _make_estimator("sklearn.ensemble.ExtraTreesClassifier"),
        "classif.gbm": _make_estimator("sklearn.ensemble.GradientBoostingClassifier"),
        "classif.hist_gbm": _make_estimator("sklearn.ensemble.HistGradientBoostingClassifier"),
        "classif.adaboost": _make_estimator("sklearn.ensemble.AdaBoostClassifier"),
        "classif.mlp": _make_estimator("sklearn.neural_network.MLPClassifier"),
        "classif.xgboost": _make_estimator("xgboost.XGBClassifier"),
        "classif.lightgbm": _make_estimator("lightgbm.LGBMClassifier"),
        "classif.catboost": _make_estimator("catboost.CatBoostClassifier"),
        # Regression
        "regr.lm": _make_estimator("sklearn.linear_model.LinearRegression"),
        "regr.ridge": _make_estimator("sklearn.linear_model.Ridge"),
        "regr.lasso": _make_estimator("sklearn.linear_model.Lasso"),
        "regr.elasticnet": _make_estimator("sklearn.linear_model.ElasticNet"),
        "regr.bayesian_ridge": _make_estimator("sklearn.linear_model.BayesianRidge"),
        "regr.gausspr": _make_estimator("sklearn.gaussian_process.GaussianProcessRegressor"),
        "regr.decision_tree": _make_estimator("sklearn.tree.DecisionTreeRegressor"),
        "regr.random_forest": _make_estimator("sklearn.ensemble.RandomForestRegressor"),
        "regr.extra_trees": _make_estimator("sklearn.ensemble.ExtraTreesRegressor"),
        "regr.gbm": _make_estimator("sklearn.ensemble.GradientBoostingRegressor"),
        "regr.hist_gbm": _make_estimator("sklearn.ensemble.HistGradientBoostingRegressor"),
        "regr.knn": _make_estimator("sklearn.neighbors.KNeighborsRegressor"),
        "regr.svm": _make_estimator("sklearn.svm.SVR"),
        "regr.mlp": _make_estimator("sklearn.neural_network.MLPRegressor"),
        "regr.xgboost": _make_estimator("xgboost.XGBRegressor"),
        "regr.lightgbm": _make_estimator("lightgbm.LGBMRegressor"),
        "regr.catboost": _make_estimator("catboost.CatBoostRegressor"),
        # Clustering
        "cluster.kmeans": _make_estimator("sklearn.cluster.KMeans"),
        "cluster.minibatch_kmeans": _make_estimator("sklearn.cluster.MiniBatchKMeans"),
        "cluster.kmedoids": _make_kmedoids,
        "cluster.agglomerative": _make_estimator("sklearn.cluster.AgglomerativeClustering"),
        "cluster.dbscan": _make_estimator("sklearn.cluster.DBSCAN"),
        "cluster.hdbscan": _make_hdbscan,
        "cluster.gmm": _make_estimator("sklearn.mixture.GaussianMixture"),
        # Survival
        "surv.coxph": _make_estimator("sksurv.linear_model.CoxPHSurvivalAnalysis"),
        "surv.coxnet": _make_estimator("sksurv.linear_model.CoxnetSurvivalAnalysis"),
        "surv.random_forest": _make_estimator("sksurv.ensemble.RandomSurvivalForest"),
        "surv.gbm": _make_estimator("sksurv.ensemble.GradientBoostingSurvivalAnalysis"),
        # Multilabel
        "multilabel.knn": _make_estimator("sklearn.neighbors.KNeighborsClassifier"),
        "multilabel.decision_tree": _make_estimator("sklearn.tree.DecisionTreeClassifier"),
        "multilabel.random_forest": _make_estimator("sklearn.ensemble.RandomForestClassifier"),
    }

    cards = _classif_cards() + _regr_cards() + _cluster_cards() + _surv_cards() + _multilabel_cards()
    for c in cards:
        if c.cl not in factories:
            raise RegistryError(f"Built-in learner '{c.cl}' has no factory")
        registry.register(c, factories[c.cl])

    return registry
